"""
Page Scripts - JavaScript fragments for every DOM-touching step.

Each fragment is a function expression. The in-process runner passes them
to ``evaluate``/``evaluate_handle``; the standalone generator inlines the
very same text, so both front ends resolve and select identically.
"""

import json

# Attributes checked, in order, by the exact-identity strategy
EXACT_ATTRIBUTES = ("data-control-id", "data-testid", "data-node-id", "data-id")

# Elements shaped like a selection control
CONTROL_SHAPE_SELECTOR = (
    'select, [role="combobox"], [role="listbox"], '
    '[class*="dropdown"], [class*="select"]'
)

# Ancestors that wrap a control together with its caption
CONTAINER_MARKER_SELECTOR = '[class*="control"], [class*="filter"], [data-control-id]'

# Options of an opened custom widget, by role
OPTION_ROLE_SELECTOR = '[role="option"]'

# Looser option shapes, used only when no element has the option role
OPTION_SHAPE_SELECTOR = '[data-value], [class*="option"], [class*="select-item"]'

# Window property holding the last widget trigger that was clicked open
TRIGGER_KEY = "__dropdownAutoselectTrigger"

# Page function receiving (watch key, added count) from every watch
NOTIFY_BINDING = "__dropdownAutoselectNotify"


RESOLVE_BY_ATTRIBUTE_JS = r'''
(id) => {
    const attributes = __ATTRIBUTES__;
    for (const name of attributes) {
        const el = document.querySelector('[' + name + '="' + CSS.escape(id) + '"]');
        if (el) return el;
    }
    return null;
}
'''.replace("__ATTRIBUTES__", json.dumps(list(EXACT_ATTRIBUTES))).strip()


RESOLVE_BY_LABEL_JS = r'''
(id) => {
    for (const el of document.querySelectorAll('[aria-label], [title]')) {
        const label = el.getAttribute('aria-label') || '';
        const title = el.getAttribute('title') || '';
        if (label.includes(id) || title.includes(id)) return el;
    }
    return null;
}
'''.strip()


RESOLVE_BY_PROXIMITY_JS = r'''
(id) => {
    for (const el of document.querySelectorAll(__CONTROL_SHAPE__)) {
        const parent = el.parentElement;
        const container = parent ? parent.closest(__CONTAINER_MARKER__) : null;
        if (container && (container.textContent || '').includes(id)) return el;
    }
    return null;
}
'''.replace(
    "__CONTROL_SHAPE__", json.dumps(CONTROL_SHAPE_SELECTOR)
).replace(
    "__CONTAINER_MARKER__", json.dumps(CONTAINER_MARKER_SELECTOR)
).strip()


TAG_NAME_JS = "(el) => el.tagName"


SELECT_NATIVE_JS = r'''
(el) => {
    const options = el.options ? Array.from(el.options) : [];
    if (!options.length) return { ok: false, reason: 'no options' };
    const first = options[0];
    const start = (first.value === '' && first.text.trim() === '') ? 1 : 0;
    if (start >= options.length) return { ok: false, reason: 'only a placeholder option' };
    el.selectedIndex = start;
    el.dispatchEvent(new Event('change', { bubbles: true }));
    el.dispatchEvent(new Event('input', { bubbles: true }));
    return { ok: true, index: start, label: options[start].text.trim() };
}
'''.strip()


OPEN_WIDGET_JS = r'''
(el) => {
    window[__TRIGGER_KEY__] = el;
    el.click();
}
'''.replace("__TRIGGER_KEY__", json.dumps(TRIGGER_KEY)).strip()


PICK_VISIBLE_OPTION_JS = r'''
() => {
    const trigger = window[__TRIGGER_KEY__] || null;
    const usable = (el) => {
        if (trigger && (el.contains(trigger) || trigger.contains(el))) return false;
        const rect = el.getBoundingClientRect();
        return rect.width > 0 && rect.height > 0;
    };
    // Innermost matches only, so a list container never wins over its items
    const leaves = (els) => els.filter((el) => !els.some((other) => other !== el && el.contains(other)));
    let visible = leaves(Array.from(document.querySelectorAll(__OPTION_ROLE__)).filter(usable));
    if (!visible.length) {
        visible = leaves(Array.from(document.querySelectorAll(__OPTION_SHAPE__)).filter(usable));
    }
    if (!visible.length) return null;
    const choice = visible[0];
    choice.click();
    return (choice.textContent || '').trim();
}
'''.replace(
    "__TRIGGER_KEY__", json.dumps(TRIGGER_KEY)
).replace(
    "__OPTION_ROLE__", json.dumps(OPTION_ROLE_SELECTOR)
).replace(
    "__OPTION_SHAPE__", json.dumps(OPTION_SHAPE_SELECTOR)
).strip()


# Installed in the page; reports (key, added-node count) for every batch
WATCH_MUTATIONS_JS = r'''
([key, binding]) => {
    const observer = new MutationObserver((records) => {
        let added = 0;
        for (const record of records) added += record.addedNodes.length;
        window[binding](key, added);
    });
    observer.observe(document.body, { childList: true, subtree: true });
    window[key] = observer;
}
'''.strip()


DISCONNECT_WATCH_JS = r'''
(key) => {
    const observer = window[key];
    if (observer) {
        observer.disconnect();
        delete window[key];
    }
}
'''.strip()
