"""
Site Compiler -- Hydration Runtime Tests

The runtime is JavaScript, so the behavioral tests run it under Node.js with
a small DOM stand-in. They are skipped when `node` is not installed.

Island isolation: one island's endpoint fails, the other's succeeds. The
failing island ends in the error state with an inline note; the other
still loads and renders its fetched data.
"""

import json
import shutil
import subprocess

import pytest

from engine.compiler.classifier import CLASSIFICATION_TABLE
from engine.compiler.components.interactive import CART_SCRIPT
from engine.compiler.hydration import RENDERED_TYPES, RUNTIME_JS, runtime_script

NODE = shutil.which("node")
requires_node = pytest.mark.skipif(NODE is None, reason="node is not installed")

# Minimal DOM: elements by id, on-demand children for querySelector,
# window listeners that tests fire by hand, and an in-memory localStorage.
DOM_STUB = r"""
const listeners = {};
const elements = {};
const fetchCalls = [];
const storage = {};

function listen(registry, type, fn, options) {
  (registry[type] = registry[type] || []).push({ fn: fn, once: !!(options && options.once) });
}

function fire(type, event) {
  const registered = listeners[type] || [];
  listeners[type] = registered.filter((l) => !l.once);
  registered.forEach((l) => l.fn(event || { type: type }));
}

const tick = () => new Promise((resolve) => setTimeout(resolve, 0));

function makeClassList() {
  const names = new Set();
  return {
    add: (...c) => c.forEach((x) => names.add(x)),
    remove: (...c) => c.forEach((x) => names.delete(x)),
    contains: (c) => names.has(c),
    toggle: (c, force) => {
      const on = force === undefined ? !names.has(c) : force;
      if (on) names.add(c); else names.delete(c);
      return on;
    },
    values: () => Array.from(names).sort()
  };
}

function makeElement(id) {
  return {
    id: id,
    className: '',
    innerHTML: '',
    _text: '',
    get textContent() { return this._text; },
    set textContent(value) { this._text = String(value); this.children = []; },
    classList: makeClassList(),
    attributes: {},
    children: [],
    found: {},
    listeners: {},
    setAttribute(name, value) { this.attributes[name] = String(value); },
    getAttribute(name) { return name in this.attributes ? this.attributes[name] : null; },
    appendChild(child) { this.children.push(child); return child; },
    addEventListener(type, fn, options) { listen(this.listeners, type, fn, options); },
    click() { (this.listeners.click || []).forEach((l) => l.fn({ type: 'click' })); },
    querySelector(selector) {
      if (selector === '.island-error') {
        return this.children.find((c) => c.className === 'island-error') || null;
      }
      if (!this.found[selector]) this.found[selector] = makeElement(null);
      return this.found[selector];
    },
    querySelectorAll() { return []; }
  };
}

globalThis.window = globalThis;
window.addEventListener = (type, fn, options) => listen(listeners, type, fn, options);
window.dispatchEvent = (event) => { fire(event.type, event); return true; };
Object.defineProperty(globalThis, 'CustomEvent', {
  configurable: true,
  writable: true,
  value: class {
    constructor(type, init) { this.type = type; this.detail = init ? init.detail : undefined; }
  }
});
Object.defineProperty(globalThis, 'localStorage', {
  configurable: true,
  writable: true,
  value: {
    getItem: (key) => (key in storage ? storage[key] : null),
    setItem: (key, value) => { storage[key] = String(value); },
    removeItem: (key) => { delete storage[key]; }
  }
});
globalThis.document = {
  readyState: 'complete',
  getElementById: (id) => elements[id] || null,
  createElement: () => makeElement(null),
  addEventListener: () => {}
};
"""


def run_node(script, tmp_path):
    path = tmp_path / "runtime_test.js"
    path.write_text(script, encoding="utf-8")
    result = subprocess.run([NODE, str(path)], capture_output=True, text=True, timeout=30)
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout.strip().splitlines()[-1])


def island(component_id, component_type, endpoint, props=None, strategy="immediate"):
    return {
        "id": component_id,
        "type": component_type,
        "props": props or {},
        "apiEndpoint": endpoint,
        "cacheStrategy": "hybrid",
        "hydrationStrategy": strategy,
    }


# ============================================================================
# Static checks (no node needed)
# ============================================================================


class TestRuntimeSource:
    def test_every_dynamic_type_has_a_renderer(self):
        dynamic = {t for t, record in CLASSIFICATION_TABLE.items() if record.is_dynamic}
        assert dynamic == set(RENDERED_TYPES)
        for component_type in RENDERED_TYPES:
            assert f"'{component_type}': function (el, data)" in RUNTIME_JS

    def test_script_header_and_base(self):
        script = runtime_script("Acme */ Inc", "https://api.acme.test/")
        assert script.startswith("/* Global JavaScript for Acme  Inc */")
        assert 'var DEFAULT_API_BASE = "https://api.acme.test";' in script

    def test_base_url_cannot_close_a_script_tag(self):
        script = runtime_script("Acme", "https://x.test/</script>")
        assert "</script>" not in script

    def test_globals_handshake(self):
        for name in ("__DYNAMIC_COMPONENTS__", "__API_BASE_URL__", "__ISLANDS__", "SiteRuntime", "pagehide"):
            assert name in RUNTIME_JS


# ============================================================================
# Behavior under node
# ============================================================================


@requires_node
class TestIslandIsolation:
    def test_failing_island_does_not_affect_sibling(self, tmp_path):
        records = [
            island("bad", "testimonials", "/api/testimonials"),
            island("good", "blog-list", "/api/blog/posts", {"title": "Blog"}),
        ]
        harness = DOM_STUB + r"""
elements['component-bad'] = makeElement('component-bad');
elements['component-good'] = makeElement('component-good');
window.fetch = async (url) => {
  fetchCalls.push(url);
  if (url.endsWith('/api/testimonials')) throw new TypeError('network down');
  return { ok: true, status: 200, json: async () => ({ posts: [{ title: 'Live post', slug: '/blog/live' }] }) };
};
""" + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then((results) => {
  const good = elements['component-good'];
  const bad = elements['component-bad'];
  console.log(JSON.stringify({
    results: results.map((r) => r.status === 'fulfilled' ? r.value : 'rejected'),
    islands: window.__ISLANDS__,
    goodState: good.getAttribute('data-island-state'),
    goodClasses: good.classList.values(),
    goodPosts: good.querySelector('[data-island-slot="posts"]').innerHTML,
    badState: bad.getAttribute('data-island-state'),
    badClasses: bad.classList.values(),
    badNotes: bad.children.map((c) => [c.className, c.getAttribute('role'), c.textContent]),
    fetchCalls: fetchCalls.sort()
  }));
});
"""
        out = run_node(harness, tmp_path)

        assert out["results"] == ["error", "loaded"]
        assert out["islands"] == {"bad": "error", "good": "loaded"}
        assert out["goodState"] == "loaded"
        assert out["goodClasses"] == ["dynamic-component", "loaded"]
        assert "Live post" in out["goodPosts"]
        assert 'href="/blog/live"' in out["goodPosts"]
        assert out["badState"] == "error"
        assert out["badClasses"] == ["dynamic-component", "error"]
        assert len(out["badNotes"]) == 1
        assert out["badNotes"][0][0] == "island-error"
        assert out["badNotes"][0][1] == "alert"
        assert "/api/testimonials" in out["badNotes"][0][2]
        assert out["fetchCalls"] == ["https://api.test/api/blog/posts", "https://api.test/api/testimonials"]

    def test_http_error_status_is_isolated(self, tmp_path):
        records = [island("a", "stats", "/api/stats"), island("b", "newsletter", "/api/newsletter")]
        harness = DOM_STUB + r"""
elements['component-a'] = makeElement('component-a');
elements['component-b'] = makeElement('component-b');
window.__API_BASE_URL__ = 'https://live.test';
window.fetch = async (url) => {
  fetchCalls.push(url);
  if (url.endsWith('/api/stats')) return { ok: false, status: 503, json: async () => ({}) };
  return { ok: true, status: 200, json: async () => ({ subscriberCount: 1200 }) };
};
""" + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then((results) => {
  console.log(JSON.stringify({
    islands: window.__ISLANDS__,
    subscribers: elements['component-b'].querySelector('[data-island-slot="subscribers"]').textContent,
    note: elements['component-a'].children.map((c) => c.textContent),
    fetchCalls: fetchCalls.sort()
  }));
});
"""
        out = run_node(harness, tmp_path)

        assert out["islands"] == {"a": "error", "b": "loaded"}
        assert out["subscribers"] == "Join 1200 subscribers"
        assert "HTTP 503" in out["note"][0]
        assert out["fetchCalls"] == ["https://live.test/api/newsletter", "https://live.test/api/stats"]

    def test_fetched_data_wins_over_props(self, tmp_path):
        records = [island("p", "blog-list", "/api/blog/posts", {"title": "Static title", "posts": []})]
        harness = DOM_STUB + r"""
elements['component-p'] = makeElement('component-p');
window.fetch = async () => ({ ok: true, status: 200, json: async () => ({ title: 'Fresh title' }) });
""" + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then(() => {
  const el = elements['component-p'];
  console.log(JSON.stringify({ title: el.querySelector('.blog-title').textContent }));
});
"""
        assert run_node(harness, tmp_path) == {"title": "Fresh title"}

    def test_island_without_endpoint_uses_props(self, tmp_path):
        records = [island("n", "newsletter", None, {"subscriberCount": 7})]
        harness = DOM_STUB + r"""
elements['component-n'] = makeElement('component-n');
window.fetch = async (url) => { fetchCalls.push(url); throw new Error('should not fetch'); };
""" + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then(() => {
  console.log(JSON.stringify({
    state: window.__ISLANDS__.n,
    text: elements['component-n'].querySelector('[data-island-slot="subscribers"]').textContent,
    fetchCalls: fetchCalls
  }));
});
"""
        assert run_node(harness, tmp_path) == {"state": "loaded", "text": "Join 7 subscribers", "fetchCalls": []}

    def test_missing_container(self, tmp_path):
        records = [island("ghost", "stats", "/api/stats")]
        harness = DOM_STUB + r"""
window.fetch = async () => ({ ok: true, status: 200, json: async () => ({}) });
""" + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then((results) => {
  console.log(JSON.stringify({ value: results[0].value, state: window.__ISLANDS__.ghost }));
});
"""
        assert run_node(harness, tmp_path) == {"value": "missing", "state": "missing"}


@requires_node
class TestAbortOnPagehide:
    def test_pagehide_aborts_without_error_state(self, tmp_path):
        records = [island("slow", "stats", "/api/stats")]
        harness = DOM_STUB + r"""
elements['component-slow'] = makeElement('component-slow');
window.fetch = (url, init) => new Promise((resolve, reject) => {
  init.signal.addEventListener('abort', () => {
    const error = new Error('The operation was aborted');
    error.name = 'AbortError';
    reject(error);
  });
});
""" + runtime_script("Test", "https://api.test") + """
const pending = window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""");
fire('pagehide');
pending.then((results) => {
  const el = elements['component-slow'];
  console.log(JSON.stringify({
    value: results[0].value,
    state: window.__ISLANDS__.slow,
    domState: el.getAttribute('data-island-state'),
    notes: el.children.length
  }));
});
"""
        out = run_node(harness, tmp_path)
        assert out == {"value": "aborted", "state": "aborted", "domState": "loading", "notes": 0}


def fetch_ok(data):
    return (
        "window.fetch = async (url, init) => { fetchCalls.push(url); "
        "return { ok: true, status: 200, json: async () => (" + json.dumps(data) + ") }; };\n"
    )


@requires_node
class TestHydrationTiming:
    def test_immediate_fetches_before_load(self, tmp_path):
        records = [island("now", "countdown", "/api/countdown", strategy="immediate")]
        harness = DOM_STUB + r"""
document.readyState = 'loading';
elements['component-now'] = makeElement('component-now');
""" + fetch_ok({}) + runtime_script("Test", "https://api.test") + """
const pending = window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""");
const calledAtOnce = fetchCalls.length;
pending.then((results) => {
  console.log(JSON.stringify({ calledAtOnce: calledAtOnce, value: results[0].value }));
});
"""
        assert run_node(harness, tmp_path) == {"calledAtOnce": 1, "value": "loaded"}

    def test_lazy_waits_for_load(self, tmp_path):
        records = [island("later", "stats", "/api/stats", strategy="lazy")]
        harness = DOM_STUB + r"""
document.readyState = 'loading';
elements['component-later'] = makeElement('component-later');
""" + fetch_ok({}) + runtime_script("Test", "https://api.test") + """
(async () => {
  const pending = window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""");
  await tick();
  await tick();
  const beforeLoad = fetchCalls.length;
  const notStarted = window.__ISLANDS__.later === undefined;
  document.readyState = 'complete';
  fire('load');
  const results = await pending;
  console.log(JSON.stringify({
    beforeLoad: beforeLoad,
    notStarted: notStarted,
    afterLoad: fetchCalls.length,
    value: results[0].value
  }));
})();
"""
        out = run_node(harness, tmp_path)
        assert out == {"beforeLoad": 0, "notStarted": True, "afterLoad": 1, "value": "loaded"}

    def test_lazy_runs_when_page_already_loaded(self, tmp_path):
        records = [island("later", "stats", "/api/stats", strategy="lazy")]
        harness = DOM_STUB + r"""
elements['component-later'] = makeElement('component-later');
""" + fetch_ok({}) + runtime_script("Test", "https://api.test") + """
window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""").then((results) => {
  console.log(JSON.stringify({ calls: fetchCalls.length, value: results[0].value, waiting: (listeners.load || []).length }));
});
"""
        assert run_node(harness, tmp_path) == {"calls": 1, "value": "loaded", "waiting": 0}

    def test_viewport_waits_for_intersection(self, tmp_path):
        records = [island("seen", "blog-list", "/api/blog/posts", strategy="viewport")]
        harness = DOM_STUB + r"""
const observers = [];
window.IntersectionObserver = class {
  constructor(callback, options) {
    this.callback = callback;
    this.options = options;
    this.targets = [];
    this.disconnected = false;
    observers.push(this);
  }
  observe(el) { this.targets.push(el.id); }
  disconnect() { this.disconnected = true; }
};
elements['component-seen'] = makeElement('component-seen');
""" + fetch_ok({"posts": []}) + runtime_script("Test", "https://api.test") + """
(async () => {
  const pending = window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""");
  await tick();
  const beforeVisible = fetchCalls.length;
  const observer = observers[0];
  observer.callback([{ isIntersecting: false }]);
  await tick();
  const offscreen = fetchCalls.length;
  observer.callback([{ isIntersecting: true }]);
  const results = await pending;
  console.log(JSON.stringify({
    beforeVisible: beforeVisible,
    offscreen: offscreen,
    afterVisible: fetchCalls.length,
    targets: observer.targets,
    rootMargin: observer.options.rootMargin,
    disconnected: observer.disconnected,
    value: results[0].value
  }));
})();
"""
        out = run_node(harness, tmp_path)
        assert out == {
            "beforeVisible": 0,
            "offscreen": 0,
            "afterVisible": 1,
            "targets": ["component-seen"],
            "rootMargin": "200px",
            "disconnected": True,
            "value": "loaded",
        }

    def test_viewport_without_observer_falls_back_to_load(self, tmp_path):
        records = [island("seen", "newsletter", "/api/newsletter", strategy="viewport")]
        harness = DOM_STUB + r"""
delete window.IntersectionObserver;
document.readyState = 'loading';
elements['component-seen'] = makeElement('component-seen');
""" + fetch_ok({"subscriberCount": 3}) + runtime_script("Test", "https://api.test") + """
(async () => {
  const pending = window.SiteRuntime.hydrateAll(""" + json.dumps(records) + r""");
  await tick();
  const beforeLoad = fetchCalls.length;
  document.readyState = 'complete';
  fire('load');
  const results = await pending;
  console.log(JSON.stringify({ beforeLoad: beforeLoad, afterLoad: fetchCalls.length, value: results[0].value }));
})();
"""
        assert run_node(harness, tmp_path) == {"beforeLoad": 0, "afterLoad": 1, "value": "loaded"}


@requires_node
class TestIslandRenderers:
    def hydrate(self, tmp_path, record, data, setup=""):
        harness = (
            DOM_STUB
            + "elements['component-" + record["id"] + "'] = makeElement('component-" + record["id"] + "');\n"
            + "const el = elements['component-" + record["id"] + "'];\n"
            + fetch_ok(data)
            + runtime_script("Test", "https://api.test")
            + setup
            + "\nwindow.SiteRuntime.hydrateAll(" + json.dumps([record]) + ").then((results) => {\n"
            + "  console.log(JSON.stringify(Object.assign({ value: results[0].value }, report())));\n"
            + "});\n"
        )
        return run_node(harness, tmp_path)

    def test_stats(self, tmp_path):
        report = r"""
function report() {
  return {
    title: el.querySelector('.stats-title').textContent,
    html: el.querySelector('[data-island-slot="stats"]').innerHTML
  };
}
"""
        out = self.hydrate(
            tmp_path,
            island("s", "stats", "/api/stats"),
            {"title": "Numbers", "stats": [{"value": 42, "label": "<b>Clients</b>"}]},
            report,
        )
        assert out["value"] == "loaded"
        assert out["title"] == "Numbers"
        assert 'data-target="42"' in out["html"]
        assert "&lt;b&gt;Clients&lt;/b&gt;" in out["html"]

    def test_countdown(self, tmp_path):
        report = r"""
function report() {
  return {
    title: el.querySelector('.countdown-title').textContent,
    target: el.querySelector('.countdown-timer').getAttribute('data-target-date')
  };
}
"""
        out = self.hydrate(
            tmp_path,
            island("cd", "countdown", "/api/countdown"),
            {"title": "Launch", "targetDate": "2031-01-01T00:00:00Z"},
            report,
        )
        assert out == {"value": "loaded", "title": "Launch", "target": "2031-01-01T00:00:00Z"}

    def test_product_stock(self, tmp_path):
        report = r"""
function report() {
  const stock = el.querySelector('[data-island-slot="stock"]');
  return {
    name: el.querySelector('.product-name').textContent,
    price: el.querySelector('.current-price').textContent,
    stock: stock.textContent,
    classes: stock.classList.values(),
    disabled: el.querySelector('.add-to-cart-button').disabled
  };
}
"""
        out = self.hydrate(
            tmp_path,
            island("mug", "ecommerce-product", "/api/products"),
            {"name": "Mug", "price": 12, "inStock": False},
            report,
        )
        assert out == {
            "value": "loaded",
            "name": "Mug",
            "price": "$12",
            "stock": "Out of stock",
            "classes": ["out-of-stock"],
            "disabled": True,
        }

    def test_cart_keeps_component_rows_and_listeners(self, tmp_path):
        setup = (
            "\nstorage.cart = JSON.stringify([{ id: 'old', name: 'Old', price: 1, quantity: 1 }]);\n"
            "(function (el) {\n" + CART_SCRIPT + "\n})(el);\n"
            r"""
const items = el.querySelector('.cart-items');
const rowsBefore = items.children.map((row) => row.children[0].textContent);
function report() {
  const rows = items.children.map((row) => row.children.map((c) => c.textContent));
  const totalAfterFetch = el.querySelector('.cart-total-value').textContent;
  const stored = JSON.parse(storage.cart);
  items.children[0].children[2].click();
  return {
    rowsBefore: rowsBefore,
    rows: rows,
    slotHtml: items.innerHTML,
    totalAfterFetch: totalAfterFetch,
    stored: stored,
    rowsAfterRemove: items.children.length,
    totalAfterRemove: el.querySelector('.cart-total-value').textContent
  };
}
"""
        )
        out = self.hydrate(
            tmp_path,
            island("cart", "ecommerce-cart", "/api/cart"),
            {"items": [{"id": "a", "name": "Mug", "price": 12, "quantity": 2}]},
            setup,
        )
        assert out["value"] == "loaded"
        assert out["rowsBefore"] == ["Old"]
        assert out["rows"] == [["Mug", "Qty: 2", "Remove"]]
        assert out["slotHtml"] == ""
        assert out["totalAfterFetch"] == "24.00"
        assert out["stored"] == [{"id": "a", "name": "Mug", "price": 12, "quantity": 2}]
        assert out["rowsAfterRemove"] == 0
        assert out["totalAfterRemove"] == "0.00"


@requires_node
class TestApiHelper:
    def test_content_type_only_with_a_body(self, tmp_path):
        harness = DOM_STUB + r"""
const seen = [];
window.fetch = async (url, init) => {
  seen.push([init.method, Object.assign({}, init.headers)]);
  return { ok: true, status: 200, json: async () => ({}) };
};
""" + runtime_script("Test", "https://api.test") + r"""
(async () => {
  await window.API.get('/api/stats');
  await window.API.post('/api/newsletter/subscribe', { email: 'a@b.test' });
  await window.API.get('/api/cart', { headers: { 'X-Trace': '1' } });
  console.log(JSON.stringify(seen));
})();
"""
        assert run_node(harness, tmp_path) == [
            ["GET", {}],
            ["POST", {"Content-Type": "application/json"}],
            ["GET", {"X-Trace": "1"}],
        ]
