"""
Interactive components: form, contact, newsletter, tabs, accordion, modal,
carousel, countdown, ecommerce-product, ecommerce-cart.

These carry behavior scripts. Each script runs once its container exists,
with `el` bound to it, and only touches elements inside `el`.
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.compiler.components.base import (
    FORM_CSS,
    FORM_SCRIPT,
    ComponentDefinition,
    with_indexes,
)
from engine.compiler.props import ComponentProps, prop

# ---------------------------------------------------------------------------
# Props
# ---------------------------------------------------------------------------


@dataclass
class FormProps(ComponentProps):
    form_id: str = prop("id", "contact")
    submit_text: str = prop("submitText", "Send Message")


@dataclass
class ContactProps(ComponentProps):
    title: str = prop("title", "Get In Touch")
    description: str = prop("description")
    phone: str = prop("phone")
    email: str = prop("email")
    address: str = prop("address")
    form_id: str = prop("id", "contact")
    submit_text: str = prop("submitText", "Send Message")


@dataclass
class NewsletterProps(ComponentProps):
    title: str = prop("title", "Subscribe to Our Newsletter")
    description: str = prop("description", "Get the latest updates and news delivered to your inbox.")
    newsletter_id: str = prop("id", "newsletter")
    placeholder: str = prop("placeholder", "Enter your email")
    button_text: str = prop("buttonText", "Subscribe")


@dataclass
class Tab(ComponentProps):
    title: str = prop("title", "Tab")
    content: str = prop("content")


@dataclass
class TabsProps(ComponentProps):
    tabs: list[Tab] = prop("tabs", [], kind="list", item=Tab)


@dataclass
class AccordionItem(ComponentProps):
    title: str = prop("title")
    content: str = prop("content")


@dataclass
class AccordionProps(ComponentProps):
    title: str = prop("title", "Accordion")
    items: list[AccordionItem] = prop("items", [], kind="list", item=AccordionItem)


@dataclass
class ModalProps(ComponentProps):
    modal_id: str = prop("id", "default")
    trigger_text: str = prop("triggerText", "Open Modal")
    title: str = prop("title", "Modal Title")
    content: str = prop("content")


@dataclass
class Slide(ComponentProps):
    content: str = prop("content")
    image: str = prop("image", kind="url")


@dataclass
class CarouselProps(ComponentProps):
    items: list[Slide] = prop("items", [], kind="list", item=Slide)
    interval: int = prop("interval", 5000, kind="number")
    autoplay: bool = prop("autoplay", True, kind="bool")


@dataclass
class CountdownProps(ComponentProps):
    title: str = prop("title", "Countdown Timer")
    target_date: str = prop("targetDate")
    expired_text: str = prop("expiredText", "Countdown Expired!")


@dataclass
class ProductProps(ComponentProps):
    product_id: str = prop("id")
    name: str = prop("name")
    image: str = prop("image", kind="url")
    price: str = prop("price", "0")
    original_price: str = prop("originalPrice")
    description: str = prop("description")


@dataclass
class CartProps(ComponentProps):
    title: str = prop("title", "Shopping Cart")
    checkout_text: str = prop("checkoutText", "Proceed to Checkout")
    checkout_link: str = prop("checkoutLink", "/checkout", kind="url")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

FORM_HTML = """
<div class="form-container">
  {{> form}}
</div>
"""

CONTACT_HTML = """
<div class="contact-container">
  <div class="contact-info">
    <h2>{{title}}</h2>
    <p>{{description}}</p>
    <div class="contact-details">
      {{#phone}}<p><strong>Phone:</strong> <a href="tel:{{phone}}">{{phone}}</a></p>{{/phone}}
      {{#email}}<p><strong>Email:</strong> <a href="mailto:{{email}}">{{email}}</a></p>{{/email}}
      {{#address}}<p><strong>Address:</strong> {{address}}</p>{{/address}}
    </div>
  </div>
  <div class="contact-form-container">
    {{> form}}
  </div>
</div>
"""

NEWSLETTER_HTML = """
<div class="newsletter-container">
  <h2 class="newsletter-title">{{title}}</h2>
  <p class="newsletter-description">{{description}}</p>
  <p class="subscriber-count" data-island-slot="subscribers"></p>
  <form class="newsletter-form" data-newsletter-id="{{newsletter_id}}">
    <div class="newsletter-input-group">
      <input type="email" name="email" placeholder="{{placeholder}}" aria-label="Email address" required>
      <button type="submit">{{button_text}}</button>
    </div>
    <p class="form-status" role="status" aria-live="polite"></p>
  </form>
</div>
"""

NEWSLETTER_SCRIPT = """
var form = el.querySelector('.newsletter-form');
if (form) {
  var status = form.querySelector('.form-status');
  form.addEventListener('submit', function (e) {
    e.preventDefault();
    var email = new FormData(form).get('email');
    window.API.post('/api/newsletter/subscribe', { email: email })
      .then(function () {
        if (status) status.textContent = 'Successfully subscribed to newsletter!';
        form.reset();
      })
      .catch(function () {
        if (status) status.textContent = 'Failed to subscribe. Please try again.';
      });
  });
}
"""

TABS_HTML = """
<div class="tabs-container">
  <div class="tabs-header" role="tablist">
    {{#tabs}}
    <button class="tab-button{{#first}} active{{/first}}" role="tab" data-tab-index="{{index}}" aria-selected="{{#first}}true{{/first}}{{^first}}false{{/first}}">{{title}}</button>
    {{/tabs}}
  </div>
  <div class="tabs-content">
    {{#tabs}}
    <div class="tab-panel{{#first}} active{{/first}}" role="tabpanel" data-tab-index="{{index}}"{{^first}} hidden{{/first}}>{{content}}</div>
    {{/tabs}}
  </div>
</div>
"""

TABS_SCRIPT = """
var buttons = el.querySelectorAll('.tab-button');
var panels = el.querySelectorAll('.tab-panel');
buttons.forEach(function (button, index) {
  button.addEventListener('click', function () {
    buttons.forEach(function (b) {
      b.classList.remove('active');
      b.setAttribute('aria-selected', 'false');
    });
    panels.forEach(function (p) {
      p.classList.remove('active');
      p.hidden = true;
    });
    button.classList.add('active');
    button.setAttribute('aria-selected', 'true');
    if (panels[index]) {
      panels[index].classList.add('active');
      panels[index].hidden = false;
    }
  });
});
"""

ACCORDION_HTML = """
<div class="accordion-container">
  <h2 class="accordion-title">{{title}}</h2>
  <div class="accordion-list">
    {{#items}}
    <div class="accordion-item">
      <button class="accordion-header" data-accordion-index="{{index}}" aria-expanded="false">
        <span>{{title}}</span>
        <span class="accordion-toggle">+</span>
      </button>
      <div class="accordion-content" hidden><p>{{content}}</p></div>
    </div>
    {{/items}}
  </div>
</div>
"""

# One section open at a time.
ACCORDION_SCRIPT = """
var headers = el.querySelectorAll('.accordion-header');
headers.forEach(function (header) {
  header.addEventListener('click', function () {
    var content = header.nextElementSibling;
    var wasOpen = content && !content.hidden;
    headers.forEach(function (h) {
      if (h.nextElementSibling) h.nextElementSibling.hidden = true;
      h.setAttribute('aria-expanded', 'false');
      var t = h.querySelector('.accordion-toggle');
      if (t) t.textContent = '+';
    });
    if (content && !wasOpen) {
      content.hidden = false;
      header.setAttribute('aria-expanded', 'true');
      var toggle = header.querySelector('.accordion-toggle');
      if (toggle) toggle.textContent = '-';
    }
  });
});
"""

MODAL_HTML = """
<div class="modal-container">
  <button class="modal-trigger" data-modal-id="{{modal_id}}">{{trigger_text}}</button>
  <div class="modal-overlay" id="modal-{{component_id}}" role="dialog" aria-modal="true" aria-labelledby="modal-{{component_id}}-title" hidden>
    <div class="modal-content">
      <div class="modal-header">
        <h2 id="modal-{{component_id}}-title">{{title}}</h2>
        <button class="modal-close" aria-label="Close">&times;</button>
      </div>
      <div class="modal-body">{{content}}</div>
    </div>
  </div>
</div>
"""

MODAL_CSS = """
{{scope}} .modal-overlay {
  position: fixed;
  inset: 0;
  background: rgba(0, 0, 0, 0.5);
  display: flex;
  align-items: center;
  justify-content: center;
  z-index: 1000;
}
{{scope}} .modal-overlay[hidden] { display: none; }
{{scope}} .modal-content { background: #fff; border-radius: 8px; max-width: 560px; width: 90%; padding: 24px; }
{{scope}} .modal-header { display: flex; justify-content: space-between; align-items: center; }
"""

MODAL_SCRIPT = """
var trigger = el.querySelector('.modal-trigger');
var modal = el.querySelector('.modal-overlay');
var closeBtn = el.querySelector('.modal-close');
if (trigger && modal) {
  var close = function () {
    modal.hidden = true;
    document.body.style.overflow = '';
  };
  trigger.addEventListener('click', function () {
    modal.hidden = false;
    document.body.style.overflow = 'hidden';
  });
  if (closeBtn) closeBtn.addEventListener('click', close);
  modal.addEventListener('click', function (e) {
    if (e.target === modal) close();
  });
  document.addEventListener('keydown', function (e) {
    if (e.key === 'Escape' && !modal.hidden) close();
  });
}
"""

CAROUSEL_HTML = """
<div class="carousel-container" data-interval="{{interval}}" data-autoplay="{{#autoplay}}true{{/autoplay}}{{^autoplay}}false{{/autoplay}}">
  <div class="carousel-wrapper">
    <div class="carousel-track">
      {{#items}}
      <div class="carousel-slide{{#first}} active{{/first}}" data-slide-index="{{index}}">
        {{#image}}<img src="{{image}}" alt="" loading="{{#first}}eager{{/first}}{{^first}}lazy{{/first}}">{{/image}}
        {{#content}}<div class="carousel-caption">{{content}}</div>{{/content}}
      </div>
      {{/items}}
    </div>
    <button class="carousel-prev" aria-label="Previous slide">&lt;</button>
    <button class="carousel-next" aria-label="Next slide">&gt;</button>
  </div>
  <div class="carousel-indicators">
    {{#items}}<button class="carousel-indicator{{#first}} active{{/first}}" data-slide-index="{{index}}" aria-label="Go to slide {{index}}"></button>{{/items}}
  </div>
</div>
"""

CAROUSEL_CSS = """
{{scope}} .carousel-wrapper { position: relative; overflow: hidden; }
{{scope}} .carousel-slide { display: none; }
{{scope}} .carousel-slide.active { display: block; }
{{scope}} .carousel-prev,
{{scope}} .carousel-next { position: absolute; top: 50%; transform: translateY(-50%); }
{{scope}} .carousel-prev { left: 8px; }
{{scope}} .carousel-next { right: 8px; }
{{scope}} .carousel-indicator.active { background: #3498db; }
"""

CAROUSEL_SCRIPT = """
var root = el.querySelector('.carousel-container');
var slides = el.querySelectorAll('.carousel-slide');
var indicators = el.querySelectorAll('.carousel-indicator');
var current = 0;
var show = function (index) {
  slides.forEach(function (s, i) { s.classList.toggle('active', i === index); });
  indicators.forEach(function (d, i) { d.classList.toggle('active', i === index); });
};
var step = function (delta) {
  if (!slides.length) return;
  current = (current + delta + slides.length) % slides.length;
  show(current);
};
var prev = el.querySelector('.carousel-prev');
var next = el.querySelector('.carousel-next');
if (prev) prev.addEventListener('click', function () { step(-1); });
if (next) next.addEventListener('click', function () { step(1); });
indicators.forEach(function (d, i) {
  d.addEventListener('click', function () { current = i; show(current); });
});
if (root && root.dataset.autoplay === 'true' && slides.length > 1) {
  setInterval(function () { step(1); }, parseInt(root.dataset.interval, 10) || 5000);
}
"""

COUNTDOWN_HTML = """
<div class="countdown-container">
  <h2 class="countdown-title">{{title}}</h2>
  <div class="countdown-timer" data-target-date="{{target_date}}" data-expired-text="{{expired_text}}">
    <div class="countdown-item"><span class="countdown-number" data-unit="days">0</span><span class="countdown-label">Days</span></div>
    <div class="countdown-item"><span class="countdown-number" data-unit="hours">0</span><span class="countdown-label">Hours</span></div>
    <div class="countdown-item"><span class="countdown-number" data-unit="minutes">0</span><span class="countdown-label">Minutes</span></div>
    <div class="countdown-item"><span class="countdown-number" data-unit="seconds">0</span><span class="countdown-label">Seconds</span></div>
  </div>
</div>
"""

COUNTDOWN_CSS = """
{{scope}} .countdown-timer { display: flex; gap: 16px; justify-content: center; }
{{scope}} .countdown-number { display: block; font-size: 2rem; font-weight: bold; }
"""

# Reads data-target-date on every tick so hydration can move the target.
COUNTDOWN_SCRIPT = """
var timer = el.querySelector('.countdown-timer');
if (timer) {
  var units = {};
  timer.querySelectorAll('.countdown-number').forEach(function (n) { units[n.dataset.unit] = n; });
  var tick = function () {
    var target = new Date(timer.dataset.targetDate).getTime();
    if (isNaN(target)) return;
    var distance = target - Date.now();
    if (distance < 0) {
      timer.classList.add('countdown-expired');
      timer.setAttribute('data-state', 'expired');
      timer.textContent = timer.dataset.expiredText;
      clearInterval(handle);
      return;
    }
    var values = {
      days: Math.floor(distance / 86400000),
      hours: Math.floor((distance % 86400000) / 3600000),
      minutes: Math.floor((distance % 3600000) / 60000),
      seconds: Math.floor((distance % 60000) / 1000)
    };
    Object.keys(values).forEach(function (unit) {
      if (units[unit]) units[unit].textContent = values[unit];
    });
  };
  var handle = setInterval(tick, 1000);
  tick();
}
"""

PRODUCT_HTML = """
<div class="product-container">
  <div class="product-image">
    {{#image}}<img src="{{image}}" alt="{{name}}" class="product-main-image">{{/image}}
  </div>
  <div class="product-details">
    <h2 class="product-name">{{name}}</h2>
    <div class="product-price">
      <span class="current-price">${{price}}</span>
      {{#original_price}}<span class="original-price">${{original_price}}</span>{{/original_price}}
    </div>
    <p class="stock-status" data-island-slot="stock"></p>
    <div class="product-description"><p>{{description}}</p></div>
    <div class="product-options">
      <div class="quantity-selector">
        <label for="{{component_id}}-quantity">Quantity:</label>
        <input type="number" id="{{component_id}}-quantity" name="quantity" min="1" value="1">
      </div>
      <button class="add-to-cart-button" data-product-id="{{product_id}}" data-name="{{name}}" data-price="{{price}}" data-image="{{image}}">Add to Cart</button>
    </div>
  </div>
</div>
"""

PRODUCT_CSS = """
{{scope}} .product-container { display: grid; grid-template-columns: repeat(auto-fit, minmax(280px, 1fr)); gap: 32px; }
{{scope}} .product-main-image { width: 100%; border-radius: 8px; }
{{scope}} .original-price { text-decoration: line-through; color: #999; margin-left: 8px; }
{{scope}} .stock-status.out-of-stock { color: #e74c3c; }
{{scope}} .stock-status.in-stock { color: #27ae60; }
"""

# Cart lives in localStorage under "cart"; the cart component re-reads it.
PRODUCT_SCRIPT = """
var button = el.querySelector('.add-to-cart-button');
var qty = el.querySelector('input[name="quantity"]');
if (button) {
  button.addEventListener('click', function () {
    var cart = JSON.parse(localStorage.getItem('cart') || '[]');
    var id = button.dataset.productId;
    var quantity = Math.max(1, parseInt(qty && qty.value, 10) || 1);
    var existing = cart.find(function (item) { return item.id === id; });
    if (existing) {
      existing.quantity += quantity;
    } else {
      cart.push({
        id: id,
        name: button.dataset.name,
        price: parseFloat(button.dataset.price) || 0,
        image: button.dataset.image,
        quantity: quantity
      });
    }
    localStorage.setItem('cart', JSON.stringify(cart));
    window.dispatchEvent(new CustomEvent('cart:updated'));
  });
}
"""

CART_HTML = """
<div class="cart-container">
  <h2>{{title}}</h2>
  <div class="cart-items" data-island-slot="items"></div>
  <div class="cart-summary">
    <div class="cart-total">Total: $<span class="cart-total-value" data-island-slot="total">0.00</span></div>
    <a class="checkout-button" href="{{checkout_link}}">{{checkout_text}}</a>
  </div>
</div>
"""

CART_SCRIPT = """
var items = el.querySelector('.cart-items');
var total = el.querySelector('.cart-total-value');
var render = function () {
  var cart = JSON.parse(localStorage.getItem('cart') || '[]');
  var sum = 0;
  items.textContent = '';
  cart.forEach(function (item) {
    var row = document.createElement('div');
    row.className = 'cart-item';
    var name = document.createElement('h4');
    name.textContent = item.name;
    var qty = document.createElement('span');
    qty.textContent = 'Qty: ' + item.quantity;
    var remove = document.createElement('button');
    remove.textContent = 'Remove';
    remove.addEventListener('click', function () {
      var next = JSON.parse(localStorage.getItem('cart') || '[]').filter(function (i) { return i.id !== item.id; });
      localStorage.setItem('cart', JSON.stringify(next));
      render();
    });
    row.appendChild(name);
    row.appendChild(qty);
    row.appendChild(remove);
    items.appendChild(row);
    sum += (item.price || 0) * (item.quantity || 0);
  });
  total.textContent = sum.toFixed(2);
};
if (items && total) {
  window.addEventListener('cart:updated', render);
  render();
}
"""

DEFINITIONS: tuple[ComponentDefinition, ...] = (
    ComponentDefinition("form", FormProps, FORM_HTML, FORM_CSS, FORM_SCRIPT),
    ComponentDefinition("contact", ContactProps, CONTACT_HTML, FORM_CSS, FORM_SCRIPT),
    ComponentDefinition("newsletter", NewsletterProps, NEWSLETTER_HTML, script=NEWSLETTER_SCRIPT),
    ComponentDefinition("tabs", TabsProps, TABS_HTML, script=TABS_SCRIPT, context=with_indexes("tabs")),
    ComponentDefinition(
        "accordion", AccordionProps, ACCORDION_HTML, script=ACCORDION_SCRIPT, context=with_indexes("items")
    ),
    ComponentDefinition("modal", ModalProps, MODAL_HTML, MODAL_CSS, MODAL_SCRIPT),
    ComponentDefinition(
        "carousel", CarouselProps, CAROUSEL_HTML, CAROUSEL_CSS, CAROUSEL_SCRIPT, context=with_indexes("items")
    ),
    ComponentDefinition("countdown", CountdownProps, COUNTDOWN_HTML, COUNTDOWN_CSS, COUNTDOWN_SCRIPT),
    ComponentDefinition("ecommerce-product", ProductProps, PRODUCT_HTML, PRODUCT_CSS, PRODUCT_SCRIPT),
    ComponentDefinition("ecommerce-cart", CartProps, CART_HTML, script=CART_SCRIPT),
)
