"""JavaScript templates evaluated inside the embedded page.

Every template is a function expression taking one ``args`` object. Values
(phone numbers, message text, search queries, selectors, limits) are passed
as that argument by the page capability and never spliced into the source.

Selectors are best guesses against the current Google Voice markup. When
the page changes, run ``dump-dom`` and update the constants below.
"""

ROOT_SELECTOR = ".gv_root"

# ---------------------------------------------------------------------------
# Selector / keyword constants
# ---------------------------------------------------------------------------

UNREAD_BADGE_SELECTORS = [
    ".gv_root .navListItem .navItemBadge",
]

LOGGED_IN_SELECTORS = [
    ".gv_root .navListItem",
    ".gv_root [data-nav]",
    ".gv_root .user-info",
]

CURRENT_USER_SELECTORS = {
    "name": ".gv_root .user-name, .gv_root [data-user-email]",
    "phone": ".gv_root .user-phone, .gv_root [data-user-phone]",
}

MESSAGES_SPEC = {
    "items": [".gv_root [data-thread-id]", ".gv_root .thread-item", ".gv_root md-list-item"],
    "fields": {
        "name": {"selector": ".contact-name, .caller-name, [data-contact-name]"},
        "phone": {"selector": ".phone-number, [data-phone-number]"},
        "preview": {"selector": ".message-preview, .snippet, .thread-snippet"},
        "timestamp": {"selector": ".timestamp, .time, [data-timestamp]"},
    },
    "attrs": {"threadId": "data-thread-id"},
    "flags": {"isUnread": {"className": "unread", "selector": ".unread"}},
}

CONTACTS_SPEC = {
    "items": [".gv_root .contact-item", ".gv_root [data-contact-id]"],
    "fields": {
        "name": {"selector": ".contact-name, .name"},
        "phone": {"selector": ".phone-number, .number"},
    },
    "attrs": {"contactId": "data-contact-id"},
    "flags": {},
}

CALLS_SPEC = {
    "items": [".gv_root .call-item", ".gv_root [data-call-id]"],
    "fields": {
        "name": {"selector": ".caller-name, .contact-name"},
        "phone": {"selector": ".phone-number"},
        "timestamp": {"selector": ".timestamp, .call-time"},
        "type": {"selector": ".call-type, [data-call-type]", "attr": "data-call-type"},
        "duration": {"selector": ".call-duration, .duration"},
    },
    "attrs": {},
    "flags": {},
}

VOICEMAILS_SPEC = {
    "items": [".gv_root .voicemail-item", ".gv_root [data-voicemail-id]"],
    "fields": {
        "name": {"selector": ".caller-name, .contact-name"},
        "phone": {"selector": ".phone-number"},
        "timestamp": {"selector": ".timestamp"},
        "transcript": {"selector": ".transcript, .voicemail-transcript"},
        "duration": {"selector": ".duration"},
    },
    "attrs": {},
    "flags": {},
}

NAV_MESSAGES_SELECTORS = [
    '.gv_root [data-nav="messages"]',
    '.gv_root a[href*="messages"]',
    '.gv_root [aria-label*="Messages"]',
]

NAV_CALLS_SELECTORS = [
    '.gv_root [data-nav="calls"]',
    '.gv_root a[href*="calls"]',
    '.gv_root [aria-label*="Calls"]',
]

DIALPAD_SELECTORS = [
    '.gv_root [data-action="dialpad"]',
    '.gv_root [aria-label*="dialpad"]',
    ".gv_root .dialpad-button",
    '.gv_root button[aria-label*="Dial"]',
]

PHONE_INPUT_SELECTORS = [
    '.gv_root input[type="tel"]',
    ".gv_root .dialpad-input",
    '.gv_root input[aria-label*="number"]',
]

CALL_KEYWORDS = ["call", "place call", "start call", "dial"]

CALL_BUTTON_SELECTORS = [
    'button[data-action="call"]',
    '[role="dialog"] button:last-child',
    "button[jsname]",
]

COMPOSE_KEYWORDS = ["send new message", "new message"]

COMPOSE_SELECTORS = [
    '.gv_root [data-action="compose"]',
    '.gv_root [aria-label*="Send new message"]',
    ".gv_root .compose-button",
    '.gv_root button[aria-label*="new message"]',
]

RECIPIENT_INPUT_SELECTORS = [
    '.gv_root input[aria-label*="To"]',
    '.gv_root input[placeholder*="name or number"]',
    ".gv_root .recipient-input",
]

MESSAGE_INPUT_SELECTORS = [
    '.gv_root textarea[aria-label*="message"]',
    ".gv_root .message-input",
    ".gv_root textarea",
]

SEND_KEYWORDS = ["send message", "send"]
SEND_EXCLUDE_KEYWORDS = ["new message"]

SEND_BUTTON_SELECTORS = [
    '.gv_root [data-action="send"]',
    '.gv_root [aria-label*="Send"]',
    ".gv_root .send-button",
]

SEARCH_INPUT_SELECTORS = [
    '.gv_root input[type="search"]',
    '.gv_root [aria-label*="Search"]',
    ".gv_root .search-input",
]

DUMP_SELECTORS = {
    "root": ROOT_SELECTOR,
    "interactive": 'button, a, input, textarea, [role="button"], [data-action], [aria-label]',
    "nav": 'nav a, [role="navigation"] a, .nav-item, .navListItem',
    "buttons": 'button, [role="button"]',
    "inputs": "input, textarea",
    "limit": 100,
}


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

# Sums the integer text of every badge; non-numeric badges are skipped.
UNREAD_COUNT = """(args) => {
    const seen = new Set();
    let total = 0;
    for (const selector of args.selectors) {
        document.querySelectorAll(selector).forEach((badge) => {
            if (seen.has(badge)) return;
            seen.add(badge);
            const text = (badge.textContent || '').trim();
            if (!text) return;
            const count = parseInt(text, 10);
            if (!isNaN(count)) total += count;
        });
    }
    return total;
}"""

# First candidate item selector with any match wins; each field falls back
# independently so one missing node never drops the item.
SCRAPE_LIST = """(args) => {
    let items = [];
    for (const selector of args.items) {
        const found = document.querySelectorAll(selector);
        if (found.length > 0) {
            items = Array.from(found);
            break;
        }
    }
    return items.slice(0, args.limit).map((item) => {
        const row = {};
        for (const [key, spec] of Object.entries(args.fields)) {
            const el = item.querySelector(spec.selector);
            let value = el && el.textContent ? el.textContent.trim() : '';
            if (!value && el && spec.attr) {
                value = el.getAttribute(spec.attr) || '';
            }
            row[key] = value;
        }
        for (const [key, attr] of Object.entries(args.attrs)) {
            row[key] = item.getAttribute(attr) || null;
        }
        for (const [key, flag] of Object.entries(args.flags)) {
            row[key] = item.classList.contains(flag.className) ||
                       item.querySelector(flag.selector) !== null;
        }
        return row;
    });
}"""

ANY_PRESENT = """(args) => {
    return args.selectors.some((selector) => document.querySelector(selector) !== null);
}"""

CURRENT_USER = """(args) => {
    const read = (selector) => {
        const el = document.querySelector(selector);
        const text = el && el.textContent ? el.textContent.trim() : '';
        return text || null;
    };
    return { name: read(args.name), phone: read(args.phone) };
}"""

# Never throws: every section degrades to an empty array.
DUMP_DOM = """(args) => {
    const safe = (fn) => { try { return fn(); } catch (e) { return []; } };
    const text = (el, max) => (el.textContent || '').trim().substring(0, max);

    const interactiveElements = safe(() => Array.from(document.querySelectorAll(args.interactive))
        .slice(0, args.limit)
        .map((el) => {
            const dataAttributes = {};
            for (const attr of el.attributes) {
                if (attr.name.startsWith('data-')) dataAttributes[attr.name] = attr.value;
            }
            return {
                tag: el.tagName.toLowerCase(),
                id: el.id || '',
                classes: Array.from(el.classList),
                ariaLabel: el.getAttribute('aria-label'),
                dataAttributes,
                text: text(el, 50),
            };
        }));

    const navItems = safe(() => Array.from(document.querySelectorAll(args.nav)).map((el) => ({
        text: text(el, 80),
        href: el.getAttribute('href'),
        ariaLabel: el.getAttribute('aria-label'),
    })));

    const buttons = safe(() => Array.from(document.querySelectorAll(args.buttons)).map((el) => ({
        text: text(el, 30),
        ariaLabel: el.getAttribute('aria-label'),
        classes: Array.from(el.classList).join(' '),
    })));

    const inputs = safe(() => Array.from(document.querySelectorAll(args.inputs)).map((el) => ({
        type: el.getAttribute('type') || el.tagName.toLowerCase(),
        placeholder: el.getAttribute('placeholder'),
        ariaLabel: el.getAttribute('aria-label'),
        name: el.getAttribute('name'),
    })));

    let rootExists = false;
    try { rootExists = !!document.querySelector(args.root); } catch (e) {}

    return {
        url: window.location.href,
        title: document.title,
        gvRootExists: rootExists,
        navItems,
        buttons,
        inputs,
        interactiveElements,
    };
}"""

DIALER_READY = """(args) => {
    const href = window.location.href || '';
    const ready = document.readyState === 'complete' || document.readyState === 'interactive';
    const inCallsView = href.indexOf(args.path) >= 0;
    const controls = Array.from(document.querySelectorAll('button,[role="button"]'));
    const hasCallControls = controls.some((el) => {
        const text = ((el.textContent || el.getAttribute('aria-label') || '') + '').trim().toLowerCase();
        return args.keywords.some((keyword) => text.indexOf(keyword) >= 0);
    });
    return !!(ready && inCallsView && hasCallControls);
}"""

# Returns 'clicked:text:<label>', 'clicked:selector:<selector>' or
# 'not-found:<sample of visible control labels>'.
CLICK_CONTROL = """(args) => {
    const visible = (el) => !!(el && (el.offsetWidth || el.offsetHeight || el.getClientRects().length));
    const label = (el) => ((el.textContent || el.getAttribute('aria-label') || '') + '').trim().toLowerCase();
    const controls = Array.from(document.querySelectorAll('button,[role="button"]'));
    const exclude = args.exclude || [];

    for (const el of controls) {
        const text = label(el);
        if (!text || el.disabled || !visible(el)) continue;
        if (exclude.some((keyword) => text.indexOf(keyword) >= 0)) continue;
        if (args.keywords.some((keyword) => text === keyword || text.indexOf(keyword) >= 0)) {
            el.click();
            return 'clicked:text:' + text;
        }
    }

    for (const selector of args.selectors) {
        const el = document.querySelector(selector);
        if (el && !el.disabled && visible(el)) {
            el.click();
            return 'clicked:selector:' + selector;
        }
    }

    const sample = controls
        .filter(visible)
        .map(label)
        .filter((text) => text.length > 0)
        .slice(0, args.sampleSize || 8)
        .join('|');
    return 'not-found:' + sample;
}"""

# Uses the native value setter so framework-managed inputs see the change.
FILL_FIELD = """(args) => {
    let el = null;
    for (const selector of args.selectors) {
        el = document.querySelector(selector);
        if (el) break;
    }
    if (!el) return false;
    el.focus();
    const proto = el.tagName === 'TEXTAREA' ? window.HTMLTextAreaElement.prototype : window.HTMLInputElement.prototype;
    const descriptor = Object.getOwnPropertyDescriptor(proto, 'value');
    if (descriptor && descriptor.set) {
        descriptor.set.call(el, args.value);
    } else {
        el.value = args.value;
    }
    el.dispatchEvent(new Event('input', { bubbles: true }));
    if (args.pressEnter) {
        el.dispatchEvent(new KeyboardEvent('keydown', { key: 'Enter', code: 'Enter', keyCode: 13, bubbles: true }));
    }
    return true;
}"""

BODY_CHILD_COUNT = """() => {
    return document.body ? document.body.childNodes.length : null;
}"""
