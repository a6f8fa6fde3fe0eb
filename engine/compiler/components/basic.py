"""
Basic content components: hero, text, image, button, video, map,
social-links, navigation, footer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from engine.compiler.components.base import ComponentDefinition
from engine.compiler.props import ComponentProps, prop

# ---------------------------------------------------------------------------
# Props
# ---------------------------------------------------------------------------


@dataclass
class HeroProps(ComponentProps):
    title: str = prop("title", "Welcome")
    subtitle: str = prop("subtitle")
    button_text: str = prop("buttonText")
    button_link: str = prop("buttonLink", "#", kind="url")
    background_image: str = prop("backgroundImage", kind="url")


@dataclass
class TextProps(ComponentProps):
    title: str = prop("title")
    content: str = prop("content")


@dataclass
class ImageProps(ComponentProps):
    src: str = prop("src", kind="url")
    alt: str = prop("alt")
    caption: str = prop("caption")


@dataclass
class ButtonProps(ComponentProps):
    text: str = prop("text", "Button")
    link: str = prop("link", "#", kind="url")
    style: str = prop("style", "primary", kind="choice", choices=("primary", "secondary", "outline"))
    target: str = prop("target", kind="choice", choices=("_blank", "_self", "_parent", "_top"))


@dataclass
class VideoProps(ComponentProps):
    src: str = prop("src", kind="url")
    poster: str = prop("poster", kind="url")
    caption: str = prop("caption")


@dataclass
class MapProps(ComponentProps):
    map_id: str = prop("id", "default")
    latitude: float = prop("latitude", 0, kind="number")
    longitude: float = prop("longitude", 0, kind="number")
    zoom: int = prop("zoom", 13, kind="number")


@dataclass
class SocialLink(ComponentProps):
    url: str = prop("url", "#", kind="url")
    platform: str = prop("platform", "link")
    icon: str = prop("icon")
    text: str = prop("text")


@dataclass
class SocialLinksProps(ComponentProps):
    links: list[SocialLink] = prop("links", [], kind="list", item=SocialLink)


@dataclass
class NavLink(ComponentProps):
    url: str = prop("url", "#", kind="url")
    text: str = prop("text", "Link")


@dataclass
class NavigationProps(ComponentProps):
    brand_text: str = prop("brandText", "Brand")
    brand_link: str = prop("brandLink", "/", kind="url")
    links: list[NavLink] = prop("links", [], kind="list", item=NavLink)


@dataclass
class FooterProps(ComponentProps):
    title: str = prop("title", "Company Name")
    description: str = prop("description")
    links: list[NavLink] = prop("links", [], kind="list", item=NavLink)
    contact: str = prop("contact")
    copyright: str = prop("copyright", "All rights reserved.")
    year: str = prop("year")


def _social_context(props: SocialLinksProps) -> dict[str, Any]:
    ctx = props.context()
    for link in ctx["links"]:
        link["label"] = link["text"] or link["platform"]
    return ctx


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

HERO_HTML = """
<div class="hero-section">
  <div class="hero-content">
    <h1 class="hero-title">{{title}}</h1>
    <p class="hero-subtitle">{{subtitle}}</p>
    {{#button_text}}<a href="{{button_link}}" class="hero-button">{{button_text}}</a>{{/button_text}}
  </div>
  {{#background_image}}<div class="hero-background" style="background-image: url('{{background_image}}')"></div>{{/background_image}}
</div>
"""

HERO_CSS = """
{{scope}} .hero-section {
  position: relative;
  min-height: 500px;
  display: flex;
  align-items: center;
  justify-content: center;
  text-align: center;
  background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
  color: white;
}
{{scope}} .hero-background {
  position: absolute;
  inset: 0;
  background-size: cover;
  background-position: center;
  opacity: 0.3;
}
{{scope}} .hero-content { position: relative; z-index: 1; max-width: 800px; padding: 0 20px; }
{{scope}} .hero-title { font-size: 3rem; font-weight: bold; margin-bottom: 1rem; }
{{scope}} .hero-subtitle { font-size: 1.2rem; margin-bottom: 2rem; opacity: 0.9; }
{{scope}} .hero-button {
  display: inline-block;
  padding: 12px 30px;
  background-color: #fff;
  color: #333;
  text-decoration: none;
  border-radius: 5px;
  font-weight: bold;
  transition: transform 0.3s ease;
}
{{scope}} .hero-button:hover { transform: translateY(-2px); }
@media (max-width: 768px) {
  {{scope}} .hero-title { font-size: 2rem; }
  {{scope}} .hero-subtitle { font-size: 1rem; }
}
"""

TEXT_HTML = """
<div class="text-content">
  {{#title}}<h2>{{.}}</h2>{{/title}}
  <p>{{content}}</p>
</div>
"""

IMAGE_HTML = """
<figure class="image-container">
  <img src="{{src}}" alt="{{alt}}" class="responsive-image" loading="lazy">
  {{#caption}}<figcaption class="image-caption">{{caption}}</figcaption>{{/caption}}
</figure>
"""

IMAGE_CSS = """
{{scope}} .responsive-image { max-width: 100%; height: auto; display: block; }
{{scope}} .image-caption { font-size: 0.9rem; color: #666; margin-top: 8px; }
"""

BUTTON_HTML = """
<a href="{{link}}" class="button {{style}}"{{#target}} target="{{target}}" rel="noopener noreferrer"{{/target}}>{{text}}</a>
"""

BUTTON_CSS = """
{{scope}} .button {
  display: inline-block;
  padding: 12px 24px;
  border: none;
  border-radius: 5px;
  text-decoration: none;
  font-weight: bold;
  cursor: pointer;
  transition: all 0.3s ease;
  text-align: center;
}
{{scope}} .button.primary { background-color: #3498db; color: white; }
{{scope}} .button.secondary { background-color: #95a5a6; color: white; }
{{scope}} .button.outline { background-color: transparent; color: #3498db; border: 2px solid #3498db; }
{{scope}} .button:hover { transform: translateY(-2px); box-shadow: 0 4px 8px rgba(0,0,0,0.2); }
"""

VIDEO_HTML = """
<div class="video-container">
  <video controls preload="metadata" class="responsive-video"{{#poster}} poster="{{poster}}"{{/poster}}>
    <source src="{{src}}" type="video/mp4">
    Your browser does not support the video tag.
  </video>
  {{#caption}}<p class="video-caption">{{caption}}</p>{{/caption}}
</div>
"""

VIDEO_CSS = """
{{scope}} .responsive-video { width: 100%; height: auto; display: block; }
"""

MAP_HTML = """
<div class="map-container">
  <div id="map-{{map_id}}" class="map" data-lat="{{latitude}}" data-lng="{{longitude}}" data-zoom="{{zoom}}">
    <a class="map-fallback" href="https://www.openstreetmap.org/?mlat={{latitude}}&amp;mlon={{longitude}}#map={{zoom}}/{{latitude}}/{{longitude}}" target="_blank" rel="noopener noreferrer">View map</a>
  </div>
</div>
"""

MAP_CSS = """
{{scope}} .map { min-height: 300px; background: #eef2f5; display: flex; align-items: center; justify-content: center; }
"""

SOCIAL_LINKS_HTML = """
<div class="social-links-container">
  {{#links}}
  <a href="{{url}}" target="_blank" rel="noopener noreferrer" class="social-link {{platform}}">
    {{#icon}}<span class="social-icon">{{icon}}</span>{{/icon}}
    <span class="social-text">{{label}}</span>
  </a>
  {{/links}}
</div>
"""

NAVIGATION_HTML = """
<nav class="navigation-container" aria-label="Main">
  <div class="nav-brand"><a href="{{brand_link}}">{{brand_text}}</a></div>
  <div class="nav-menu">
    {{#links}}<a href="{{url}}" class="nav-link">{{text}}</a>{{/links}}
  </div>
  <button class="nav-toggle" aria-label="Toggle navigation" aria-expanded="false">
    <span></span><span></span><span></span>
  </button>
</nav>
"""

NAVIGATION_CSS = """
{{scope}} .navigation-container {
  display: flex;
  justify-content: space-between;
  align-items: center;
  padding: 1rem 2rem;
  background-color: #fff;
  box-shadow: 0 2px 4px rgba(0,0,0,0.1);
}
{{scope}} .nav-brand a { font-size: 1.5rem; font-weight: bold; text-decoration: none; color: #333; }
{{scope}} .nav-menu { display: flex; gap: 2rem; }
{{scope}} .nav-link { text-decoration: none; color: #333; font-weight: 500; transition: color 0.3s ease; }
{{scope}} .nav-link:hover { color: #3498db; }
{{scope}} .nav-toggle { display: none; flex-direction: column; background: none; border: none; cursor: pointer; }
{{scope}} .nav-toggle span { width: 25px; height: 3px; background-color: #333; margin: 3px 0; }
@media (max-width: 768px) {
  {{scope}} .nav-menu { display: none; }
  {{scope}} .nav-menu.open { display: flex; flex-direction: column; }
  {{scope}} .nav-toggle { display: flex; }
}
"""

NAVIGATION_SCRIPT = """
var toggle = el.querySelector('.nav-toggle');
var menu = el.querySelector('.nav-menu');
if (toggle && menu) {
  toggle.addEventListener('click', function () {
    var open = menu.classList.toggle('open');
    toggle.setAttribute('aria-expanded', open ? 'true' : 'false');
  });
}
"""

FOOTER_HTML = """
<footer class="footer-container">
  <div class="footer-content">
    <div class="footer-section">
      <h3>{{title}}</h3>
      <p>{{description}}</p>
    </div>
    <div class="footer-section">
      <h4>Quick Links</h4>
      <ul>
        {{#links}}<li><a href="{{url}}">{{text}}</a></li>{{/links}}
      </ul>
    </div>
    <div class="footer-section">
      <h4>Contact</h4>
      <p>{{contact}}</p>
    </div>
  </div>
  <div class="footer-bottom">
    <p>&copy; {{#year}}{{year}} {{/year}}{{copyright}}</p>
  </div>
</footer>
"""

FOOTER_CSS = """
{{scope}} .footer-container { background-color: #2c3e50; color: white; padding: 3rem 0 1rem; }
{{scope}} .footer-content {
  max-width: 1200px;
  margin: 0 auto;
  padding: 0 2rem;
  display: grid;
  grid-template-columns: repeat(auto-fit, minmax(250px, 1fr));
  gap: 2rem;
}
{{scope}} .footer-section h3,
{{scope}} .footer-section h4 { margin-bottom: 1rem; }
{{scope}} .footer-section ul { list-style: none; padding: 0; }
{{scope}} .footer-section ul li { margin-bottom: 0.5rem; }
{{scope}} .footer-section a { color: #bdc3c7; text-decoration: none; }
{{scope}} .footer-section a:hover { color: white; }
{{scope}} .footer-bottom { text-align: center; padding-top: 2rem; border-top: 1px solid #34495e; margin-top: 2rem; }
"""

DEFINITIONS: tuple[ComponentDefinition, ...] = (
    ComponentDefinition("hero", HeroProps, HERO_HTML, HERO_CSS),
    ComponentDefinition("text", TextProps, TEXT_HTML),
    ComponentDefinition("image", ImageProps, IMAGE_HTML, IMAGE_CSS, required=("src",)),
    ComponentDefinition("button", ButtonProps, BUTTON_HTML, BUTTON_CSS),
    ComponentDefinition("video", VideoProps, VIDEO_HTML, VIDEO_CSS, required=("src",)),
    ComponentDefinition("map", MapProps, MAP_HTML, MAP_CSS),
    ComponentDefinition("social-links", SocialLinksProps, SOCIAL_LINKS_HTML, context=_social_context),
    ComponentDefinition("navigation", NavigationProps, NAVIGATION_HTML, NAVIGATION_CSS, NAVIGATION_SCRIPT),
    ComponentDefinition("footer", FooterProps, FOOTER_HTML, FOOTER_CSS),
)
