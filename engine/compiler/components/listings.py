"""
List-driven components: gallery, testimonials, pricing, faq, team, stats,
timeline, blog-list.

Islands among these (testimonials, stats, blog-list) render their static
props server-side and mark the region the hydration runtime patches with
data-island-slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from engine.compiler.components.base import ComponentDefinition, with_indexes
from engine.compiler.props import ComponentProps, prop

# ---------------------------------------------------------------------------
# Props
# ---------------------------------------------------------------------------


@dataclass
class GalleryImage(ComponentProps):
    src: str = prop("src", kind="url")
    alt: str = prop("alt")
    caption: str = prop("caption")


@dataclass
class GalleryProps(ComponentProps):
    images: list[GalleryImage] = prop("images", [], kind="list", item=GalleryImage)


@dataclass
class Testimonial(ComponentProps):
    content: str = prop("content")
    name: str = prop("name", "Anonymous")
    role: str = prop("role")
    avatar: str = prop("avatar", kind="url")


@dataclass
class TestimonialsProps(ComponentProps):
    title: str = prop("title", "What Our Customers Say")
    testimonials: list[Testimonial] = prop("testimonials", [], kind="list", item=Testimonial)


@dataclass
class PricingPlan(ComponentProps):
    name: str = prop("name", "Plan")
    price: str = prop("price", "0")
    currency: str = prop("currency", "$")
    period: str = prop("period", "month")
    features: list[str] = prop("features", [], kind="strings")
    button_text: str = prop("buttonText", "Get Started")
    button_link: str = prop("buttonLink", "#", kind="url")
    featured: bool = prop("featured", False, kind="bool")


@dataclass
class PricingProps(ComponentProps):
    title: str = prop("title", "Choose Your Plan")
    plans: list[PricingPlan] = prop("plans", [], kind="list", item=PricingPlan)


@dataclass
class FAQ(ComponentProps):
    question: str = prop("question")
    answer: str = prop("answer")


@dataclass
class FAQProps(ComponentProps):
    title: str = prop("title", "Frequently Asked Questions")
    faqs: list[FAQ] = prop("faqs", [], kind="list", item=FAQ)


@dataclass
class TeamMember(ComponentProps):
    name: str = prop("name")
    role: str = prop("role")
    bio: str = prop("bio")
    photo: str = prop("photo", kind="url")
    social: list[dict[str, str]] = prop("social", [], kind="links")


@dataclass
class TeamProps(ComponentProps):
    title: str = prop("title", "Our Team")
    members: list[TeamMember] = prop("members", [], kind="list", item=TeamMember)


@dataclass
class Stat(ComponentProps):
    value: str = prop("value", "0")
    label: str = prop("label")


@dataclass
class StatsProps(ComponentProps):
    title: str = prop("title", "Our Statistics")
    stats: list[Stat] = prop("stats", [], kind="list", item=Stat)


@dataclass
class TimelineEvent(ComponentProps):
    date: str = prop("date")
    title: str = prop("title")
    description: str = prop("description")


@dataclass
class TimelineProps(ComponentProps):
    title: str = prop("title", "Timeline")
    events: list[TimelineEvent] = prop("events", [], kind="list", item=TimelineEvent)


@dataclass
class BlogPost(ComponentProps):
    title: str = prop("title")
    excerpt: str = prop("excerpt")
    slug: str = prop("slug", "#", kind="url")
    featured_image: str = prop("featuredImage", kind="url")
    author: str = prop("author")
    published_at: str = prop("publishedAt")


@dataclass
class BlogListProps(ComponentProps):
    title: str = prop("title", "Latest Posts")
    posts: list[BlogPost] = prop("posts", [], kind="list", item=BlogPost)


# Mustache resolves {{title}} inside a string section against str attributes.
def _blog_context(props: BlogListProps) -> dict[str, Any]:
    ctx = props.context()
    for post in ctx["posts"]:
        post["image_alt"] = post["title"]
    return ctx


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

GALLERY_HTML = """
<div class="gallery-container">
  <div class="gallery-grid">
    {{#images}}
    <div class="gallery-item" data-index="{{index}}">
      <img src="{{src}}" alt="{{alt}}" class="gallery-image" loading="{{#first}}eager{{/first}}{{^first}}lazy{{/first}}">
      {{#caption}}<p class="gallery-caption">{{caption}}</p>{{/caption}}
    </div>
    {{/images}}
  </div>
</div>
"""

GALLERY_CSS = """
{{scope}} .gallery-container { padding: 20px 0; }
{{scope}} .gallery-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr)); gap: 20px; }
{{scope}} .gallery-item {
  position: relative;
  overflow: hidden;
  border-radius: 8px;
  box-shadow: 0 4px 8px rgba(0,0,0,0.1);
  cursor: zoom-in;
}
{{scope}} .gallery-image { width: 100%; height: 250px; object-fit: cover; transition: transform 0.3s ease; }
{{scope}} .gallery-item:hover .gallery-image { transform: scale(1.05); }
{{scope}} .gallery-caption {
  position: absolute;
  bottom: 0;
  left: 0;
  right: 0;
  background: linear-gradient(transparent, rgba(0,0,0,0.7));
  color: white;
  padding: 20px;
  margin: 0;
}
"""

# Click-to-zoom lightbox, appended to <body> and removed on close.
GALLERY_SCRIPT = """
el.querySelectorAll('.gallery-item').forEach(function (item) {
  item.addEventListener('click', function () {
    var img = item.querySelector('.gallery-image');
    if (!img) return;
    var lightbox = document.createElement('div');
    lightbox.className = 'lightbox';
    var full = document.createElement('img');
    full.src = img.src;
    full.alt = img.alt;
    var close = document.createElement('button');
    close.className = 'lightbox-close';
    close.setAttribute('aria-label', 'Close');
    close.textContent = '\\u00d7';
    lightbox.appendChild(full);
    lightbox.appendChild(close);
    document.body.appendChild(lightbox);
    lightbox.addEventListener('click', function (e) {
      if (e.target === lightbox || e.target === close) {
        document.body.removeChild(lightbox);
      }
    });
  });
});
"""

TESTIMONIALS_HTML = """
<div class="testimonials-container">
  <h2 class="testimonials-title">{{title}}</h2>
  <div class="testimonials-grid" data-island-slot="testimonials">
    {{#testimonials}}
    <div class="testimonial-item">
      <div class="testimonial-content"><p>&ldquo;{{content}}&rdquo;</p></div>
      <div class="testimonial-author">
        {{#avatar}}<img src="{{avatar}}" alt="{{name}}" class="testimonial-avatar" loading="lazy">{{/avatar}}
        <div class="testimonial-info">
          <h4>{{name}}</h4>
          <p>{{role}}</p>
        </div>
      </div>
    </div>
    {{/testimonials}}
  </div>
</div>
"""

PRICING_HTML = """
<div class="pricing-container">
  <h2 class="pricing-title">{{title}}</h2>
  <div class="pricing-grid">
    {{#plans}}
    <div class="pricing-card{{#featured}} featured{{/featured}}">
      <h3 class="plan-name">{{name}}</h3>
      <div class="plan-price">
        <span class="currency">{{currency}}</span>
        <span class="amount">{{price}}</span>
        <span class="period">/{{period}}</span>
      </div>
      <ul class="plan-features">
        {{#features}}<li>{{.}}</li>{{/features}}
      </ul>
      <a href="{{button_link}}" class="plan-button">{{button_text}}</a>
    </div>
    {{/plans}}
  </div>
</div>
"""

PRICING_CSS = """
{{scope}} .pricing-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 24px; }
{{scope}} .pricing-card { border: 1px solid #e5e7eb; border-radius: 8px; padding: 24px; text-align: center; }
{{scope}} .pricing-card.featured { border-color: #3498db; box-shadow: 0 8px 24px rgba(52, 152, 219, 0.2); }
{{scope}} .plan-features { list-style: none; margin: 16px 0; }
"""

FAQ_HTML = """
<div class="faq-container">
  <h2 class="faq-title">{{title}}</h2>
  <div class="faq-list">
    {{#faqs}}
    <details class="faq-item">
      <summary class="faq-question" data-faq-index="{{index}}">{{question}}</summary>
      <div class="faq-answer"><p>{{answer}}</p></div>
    </details>
    {{/faqs}}
  </div>
</div>
"""

TEAM_HTML = """
<div class="team-container">
  <h2 class="team-title">{{title}}</h2>
  <div class="team-grid">
    {{#members}}
    <div class="team-member">
      {{#photo}}<img src="{{photo}}" alt="{{name}}" class="member-photo" loading="lazy">{{/photo}}
      <h3 class="member-name">{{name}}</h3>
      <p class="member-role">{{role}}</p>
      <p class="member-bio">{{bio}}</p>
      <div class="member-social">
        {{#social}}<a href="{{url}}" target="_blank" rel="noopener noreferrer" class="social-link {{platform}}">{{platform}}</a>{{/social}}
      </div>
    </div>
    {{/members}}
  </div>
</div>
"""

STATS_HTML = """
<div class="stats-container">
  <h2 class="stats-title">{{title}}</h2>
  <div class="stats-grid" data-island-slot="stats">
    {{#stats}}
    <div class="stat-item">
      <div class="stat-number" data-target="{{value}}">{{value}}</div>
      <div class="stat-label">{{label}}</div>
    </div>
    {{/stats}}
  </div>
</div>
"""

TIMELINE_HTML = """
<div class="timeline-container">
  <h2 class="timeline-title">{{title}}</h2>
  <div class="timeline">
    {{#events}}
    <div class="timeline-item {{side}}">
      <div class="timeline-content">
        <h3 class="timeline-date">{{date}}</h3>
        <h4 class="timeline-event-title">{{title}}</h4>
        <p class="timeline-description">{{description}}</p>
      </div>
    </div>
    {{/events}}
  </div>
</div>
"""

BLOG_LIST_HTML = """
<div class="blog-container">
  <h2 class="blog-title">{{title}}</h2>
  <div class="blog-grid" data-island-slot="posts">
    {{#posts}}
    <article class="blog-post">
      {{#featured_image}}<img src="{{featured_image}}" alt="{{image_alt}}" loading="lazy">{{/featured_image}}
      <div class="blog-post-content">
        <h3><a href="{{slug}}">{{title}}</a></h3>
        <p class="blog-excerpt">{{excerpt}}</p>
        <div class="blog-meta">
          <span class="blog-date">{{published_at}}</span>
          {{#author}}<span class="blog-author">By {{author}}</span>{{/author}}
        </div>
      </div>
    </article>
    {{/posts}}
  </div>
</div>
"""

BLOG_LIST_CSS = """
{{scope}} .blog-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(280px, 1fr)); gap: 24px; }
{{scope}} .blog-post img { width: 100%; height: 180px; object-fit: cover; border-radius: 6px; }
{{scope}} .blog-meta { font-size: 0.85rem; color: #666; display: flex; gap: 12px; }
"""

DEFINITIONS: tuple[ComponentDefinition, ...] = (
    ComponentDefinition(
        "gallery", GalleryProps, GALLERY_HTML, GALLERY_CSS, GALLERY_SCRIPT, context=with_indexes("images")
    ),
    ComponentDefinition("testimonials", TestimonialsProps, TESTIMONIALS_HTML),
    ComponentDefinition("pricing", PricingProps, PRICING_HTML, PRICING_CSS),
    ComponentDefinition("faq", FAQProps, FAQ_HTML, context=with_indexes("faqs")),
    ComponentDefinition("team", TeamProps, TEAM_HTML),
    ComponentDefinition("stats", StatsProps, STATS_HTML),
    ComponentDefinition("timeline", TimelineProps, TIMELINE_HTML, context=with_indexes("events")),
    ComponentDefinition("blog-list", BlogListProps, BLOG_LIST_HTML, BLOG_LIST_CSS, context=_blog_context),
)
