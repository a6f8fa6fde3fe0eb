"""
Site Compiler — Hydration Runtime

The client half of the compiler: one script per site (served as
/js/global.js) that re-activates dynamic islands after load.

Handshake with the page is exactly three globals, written by the page
compiler:

  window.__DYNAMIC_COMPONENTS__  DynamicComponentRecord[] for this page
  window.__API_BASE_URL__        prefix for every island endpoint
  window.__SITE_CONFIG__         {id, name, language, theme}

Per island, independently:
  1. container gets .dynamic-component.loading, data-island-state="loading"
  2. GET apiEndpoint (if any), merge the JSON over the static props
  3. patch the server-rendered markup in place ([data-island-slot] regions)
  4. on failure: .error + an inline .island-error note; siblings unaffected

Timing per hydrationStrategy: immediate on script run, lazy after the
window load event, viewport when the container first intersects
(IntersectionObserver; falls back to lazy without it).

Every island fetch carries its own AbortController; all of them abort on
pagehide. An aborted island is left as-is, not marked as an error. There
are no retries.

Exposed as window.SiteRuntime = {start, hydrateAll, hydrateIsland, abortAll,
HydrationFetchError}; hydrateAll resolves with the per-island outcomes
('loaded' | 'error' | 'aborted' | 'missing').
"""

from __future__ import annotations

import json

# Dynamic types with a patch-in-place renderer in RUNTIME_JS. Anything else
# hydrates (state classes, data fetch) but keeps its server markup.
RENDERED_TYPES: tuple[str, ...] = (
    "blog-list",
    "contact",
    "countdown",
    "ecommerce-cart",
    "ecommerce-product",
    "newsletter",
    "stats",
    "testimonials",
)

RUNTIME_JS = r"""
(function (window, document) {
  'use strict';

  // -------------------------------------------------------------------------
  // API helper
  // -------------------------------------------------------------------------

  class HydrationFetchError extends Error {
    constructor(endpoint, status, cause) {
      super('Failed to load ' + endpoint + (status ? ' (HTTP ' + status + ')' : ''));
      this.name = 'HydrationFetchError';
      this.endpoint = endpoint;
      this.status = status || 0;
      this.cause = cause;
    }
  }

  const isAbort = (error) => !!error && error.name === 'AbortError';

  const API = {
    get baseURL() {
      return window.__API_BASE_URL__ || DEFAULT_API_BASE;
    },

    async request(endpoint, options = {}) {
      const url = /^https?:\/\//.test(endpoint) ? endpoint : this.baseURL + endpoint;
      // Bodiless requests carry no Content-Type.
      const headers = options.body != null ? { 'Content-Type': 'application/json' } : {};
      const init = Object.assign({}, options, {
        headers: Object.assign(headers, options.headers || {})
      });
      let response;
      try {
        response = await window.fetch(url, init);
      } catch (error) {
        if (isAbort(error)) throw error;
        throw new HydrationFetchError(endpoint, 0, error);
      }
      if (!response.ok) {
        throw new HydrationFetchError(endpoint, response.status);
      }
      try {
        return await response.json();
      } catch (error) {
        throw new HydrationFetchError(endpoint, response.status, error);
      }
    },

    get(endpoint, options) {
      return this.request(endpoint, Object.assign({ method: 'GET' }, options));
    },

    post(endpoint, data, options) {
      return this.request(endpoint, Object.assign({ method: 'POST', body: JSON.stringify(data) }, options));
    },

    put(endpoint, data, options) {
      return this.request(endpoint, Object.assign({ method: 'PUT', body: JSON.stringify(data) }, options));
    },

    delete(endpoint, options) {
      return this.request(endpoint, Object.assign({ method: 'DELETE' }, options));
    }
  };

  // -------------------------------------------------------------------------
  // Helpers
  // -------------------------------------------------------------------------

  const ESCAPES = { '&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&#x27;' };

  function esc(value) {
    return String(value == null ? '' : value).replace(/[&<>"']/g, (c) => ESCAPES[c]);
  }

  function safeUrl(value) {
    const url = String(value == null ? '' : value).trim();
    const scheme = /^([a-z][a-z0-9+.\-]*):/i.exec(url.replace(/[\s\x00-\x1f]+/g, ''));
    if (scheme && ['http', 'https', 'mailto', 'tel'].indexOf(scheme[1].toLowerCase()) === -1) return '#';
    return url;
  }

  function slot(el, name) {
    return el.querySelector('[data-island-slot="' + name + '"]');
  }

  function setText(el, selector, value) {
    if (value == null || value === '') return;
    const target = el.querySelector(selector);
    if (target) target.textContent = String(value);
  }

  function isPlainObject(value) {
    return !!value && typeof value === 'object' && !Array.isArray(value);
  }

  function debounce(func, wait) {
    let timeout;
    return function (...args) {
      clearTimeout(timeout);
      timeout = setTimeout(() => func.apply(this, args), wait);
    };
  }

  function throttle(func, limit) {
    let waiting = false;
    return function (...args) {
      if (waiting) return;
      func.apply(this, args);
      waiting = true;
      setTimeout(() => { waiting = false; }, limit);
    };
  }

  // -------------------------------------------------------------------------
  // Island renderers: patch the server markup, never replace the container
  // -------------------------------------------------------------------------

  const RENDERERS = {
    'blog-list': function (el, data) {
      setText(el, '.blog-title', data.title);
      const target = slot(el, 'posts');
      if (!target || !Array.isArray(data.posts)) return;
      target.innerHTML = data.posts.map((post) => (
        '<article class="blog-post">' +
          (post.featuredImage ? '<img src="' + esc(safeUrl(post.featuredImage)) + '" alt="' + esc(post.title) + '" loading="lazy">' : '') +
          '<div class="blog-post-content">' +
            '<h3><a href="' + esc(safeUrl(post.slug || '#')) + '">' + esc(post.title) + '</a></h3>' +
            '<p class="blog-excerpt">' + esc(post.excerpt) + '</p>' +
            '<div class="blog-meta">' +
              '<span class="blog-date">' + esc(post.publishedAt) + '</span>' +
              (post.author ? '<span class="blog-author">By ' + esc(post.author) + '</span>' : '') +
            '</div>' +
          '</div>' +
        '</article>'
      )).join('');
    },

    'testimonials': function (el, data) {
      setText(el, '.testimonials-title', data.title);
      const target = slot(el, 'testimonials');
      if (!target || !Array.isArray(data.testimonials)) return;
      target.innerHTML = data.testimonials.map((t) => (
        '<div class="testimonial-item">' +
          '<div class="testimonial-content"><p>&ldquo;' + esc(t.content) + '&rdquo;</p></div>' +
          '<div class="testimonial-author">' +
            (t.avatar ? '<img src="' + esc(safeUrl(t.avatar)) + '" alt="' + esc(t.name) + '" class="testimonial-avatar" loading="lazy">' : '') +
            '<div class="testimonial-info"><h4>' + esc(t.name || 'Anonymous') + '</h4><p>' + esc(t.role) + '</p></div>' +
          '</div>' +
        '</div>'
      )).join('');
    },

    'stats': function (el, data) {
      setText(el, '.stats-title', data.title);
      const target = slot(el, 'stats');
      if (!target || !Array.isArray(data.stats)) return;
      const existing = target.querySelectorAll('.stat-number');
      if (existing.length === data.stats.length) {
        data.stats.forEach((stat, i) => {
          existing[i].textContent = String(stat.value == null ? '0' : stat.value);
          existing[i].setAttribute('data-target', String(stat.value == null ? '0' : stat.value));
        });
        return;
      }
      target.innerHTML = data.stats.map((stat) => (
        '<div class="stat-item">' +
          '<div class="stat-number" data-target="' + esc(stat.value) + '">' + esc(stat.value == null ? '0' : stat.value) + '</div>' +
          '<div class="stat-label">' + esc(stat.label) + '</div>' +
        '</div>'
      )).join('');
    },

    'newsletter': function (el, data) {
      const count = data.subscriberCount != null ? data.subscriberCount : data.subscribers;
      const target = slot(el, 'subscribers');
      if (target && count != null) {
        target.textContent = 'Join ' + count + ' subscribers';
      }
    },

    'contact': function (el, data) {
      setText(el, '.contact-info h2', data.title);
      setText(el, '.contact-info > p', data.description);
    },

    'countdown': function (el, data) {
      setText(el, '.countdown-title', data.title);
      const timer = el.querySelector('.countdown-timer');
      if (timer && data.targetDate) {
        timer.setAttribute('data-target-date', String(data.targetDate));
      }
    },

    'ecommerce-product': function (el, data) {
      setText(el, '.product-name', data.name);
      setText(el, '.current-price', data.price != null ? '$' + data.price : null);
      setText(el, '.product-description p', data.description);
      const stock = slot(el, 'stock');
      if (!stock) return;
      const inStock = data.inStock != null ? !!data.inStock : (data.stock == null || Number(data.stock) > 0);
      stock.textContent = inStock ? 'In stock' : 'Out of stock';
      stock.classList.remove('in-stock', 'out-of-stock');
      stock.classList.add(inStock ? 'in-stock' : 'out-of-stock');
      const button = el.querySelector('.add-to-cart-button');
      if (button) button.disabled = !inStock;
    },

    // The cart component's own script owns the rows (and their Remove
    // listeners); it re-renders from localStorage on cart:updated.
    'ecommerce-cart': function (el, data) {
      setText(el, '.cart-container h2', data.title);
      if (!Array.isArray(data.items)) return;
      const cart = data.items.filter(isPlainObject).map((item) => ({
        id: item.id,
        name: String(item.name == null ? '' : item.name),
        price: Number(item.price) || 0,
        quantity: Number(item.quantity) || 0
      }));
      window.localStorage.setItem('cart', JSON.stringify(cart));
      window.dispatchEvent(new CustomEvent('cart:updated'));
    }
  };

  // -------------------------------------------------------------------------
  // Hydration
  // -------------------------------------------------------------------------

  const islands = window.__ISLANDS__ = window.__ISLANDS__ || {};
  const controllers = new Map();

  function setState(el, state) {
    el.classList.remove('loading', 'loaded', 'error');
    el.classList.add(state);
    el.setAttribute('data-island-state', state);
  }

  function showError(el, error) {
    let note = el.querySelector('.island-error');
    if (!note) {
      note = document.createElement('div');
      note.className = 'island-error';
      note.setAttribute('role', 'alert');
      el.appendChild(note);
    }
    note.textContent = 'This section could not be updated: ' + (error && error.message ? error.message : 'unknown error');
  }

  async function loadIsland(record, signal) {
    const props = isPlainObject(record.props) ? record.props : {};
    if (!record.apiEndpoint) return Object.assign({}, props);
    const data = await API.get(record.apiEndpoint, signal ? { signal } : undefined);
    return Object.assign({}, props, isPlainObject(data) ? data : {});
  }

  function hydrateIsland(record) {
    const el = document.getElementById('component-' + record.id);
    if (!el) {
      islands[record.id] = 'missing';
      return Promise.resolve('missing');
    }

    el.classList.add('dynamic-component');
    setState(el, 'loading');
    islands[record.id] = 'loading';

    const controller = typeof AbortController === 'function' ? new AbortController() : null;
    if (controller) controllers.set(record.id, controller);

    return loadIsland(record, controller && controller.signal)
      .then((data) => {
        const render = RENDERERS[record.type];
        if (render) render(el, data);
        setState(el, 'loaded');
        islands[record.id] = 'loaded';
        return 'loaded';
      })
      .catch((error) => {
        if (isAbort(error)) {
          islands[record.id] = 'aborted';
          return 'aborted';
        }
        console.error('Failed to hydrate component ' + record.id + ':', error);
        setState(el, 'error');
        showError(el, error);
        islands[record.id] = 'error';
        return 'error';
      })
      .finally(() => {
        controllers.delete(record.id);
      });
  }

  function afterLoad() {
    return new Promise((resolve) => {
      if (document.readyState === 'complete') {
        resolve();
      } else {
        window.addEventListener('load', () => resolve(), { once: true });
      }
    });
  }

  function whenVisible(record) {
    const el = document.getElementById('component-' + record.id);
    if (!el || typeof window.IntersectionObserver !== 'function') {
      return afterLoad();
    }
    return new Promise((resolve) => {
      const observer = new window.IntersectionObserver((entries) => {
        if (entries.some((entry) => entry.isIntersecting)) {
          observer.disconnect();
          resolve();
        }
      }, { rootMargin: '200px' });
      observer.observe(el);
    });
  }

  function schedule(record) {
    switch (record.hydrationStrategy) {
      case 'immediate':
        return hydrateIsland(record);
      case 'viewport':
        return whenVisible(record).then(() => hydrateIsland(record));
      default:
        return afterLoad().then(() => hydrateIsland(record));
    }
  }

  function hydrateAll(records) {
    const list = Array.isArray(records) ? records : [];
    return Promise.allSettled(list.map((record) => {
      try {
        return schedule(record);
      } catch (error) {
        return Promise.reject(error);
      }
    }));
  }

  function abortAll() {
    controllers.forEach((controller) => controller.abort());
    controllers.clear();
  }

  function start() {
    return hydrateAll(window.__DYNAMIC_COMPONENTS__);
  }

  window.addEventListener('pagehide', abortAll);

  window.API = API;
  window.debounce = debounce;
  window.throttle = throttle;
  window.SiteRuntime = { start, hydrateAll, hydrateIsland, abortAll, HydrationFetchError };

  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', start, { once: true });
  } else {
    start();
  }
})(window, document);
"""


def runtime_script(site_name: str | None, api_base_url: str) -> str:
    """The global script for one site: header, default API base, runtime."""
    name = (site_name or "Untitled Site").replace("*/", "")
    default_base = json.dumps(api_base_url.rstrip("/"), ensure_ascii=False).replace("</", "<\\/")
    return "\n".join(
        [
            f"/* Global JavaScript for {name} */",
            f"var DEFAULT_API_BASE = {default_base};",
            RUNTIME_JS.strip("\n"),
            "",
        ]
    )
