# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static lookup tables for HTML elements and attributes.

Every well-known element or attribute name is assigned an *atom*, a small
positive integer. Atom ``0`` means "unknown". Ids are assigned by sorting the
canonical names, so the mapping is stable across processes and
``(element_atom << 32) | attr_atom`` identifies every element/attribute pair.
"""

from __future__ import annotations

# ###############
# Public Interface
# ###############

#: Elements that must not have children.
VOID_ELEMENT_NAMES: frozenset[str] = frozenset(
    {
        "area",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

#: Elements whose content keeps its whitespace.
PREFORMATTED_ELEMENT_NAMES: frozenset[str] = frozenset({"pre", "listing", "textarea"})

#: Host elements. Any other tag name is treated as a component reference.
COMMON_ELEMENT_NAMES: frozenset[str] = frozenset(
    {
        # HTML
        "a", "abbr", "address", "area", "article", "aside", "audio", "b",
        "base", "bdi", "bdo", "blockquote", "body", "br", "button", "canvas",
        "caption", "cite", "code", "col", "colgroup", "command", "data", "datalist",
        "dd", "del", "details", "dfn", "dialog", "div", "dl", "dt",
        "em", "embed", "fieldset", "figcaption", "figure", "footer", "form", "h1",
        "h2", "h3", "h4", "h5", "h6", "head", "header", "hgroup",
        "hr", "html", "i", "iframe", "img", "input", "ins", "kbd",
        "keygen", "label", "legend", "li", "link", "main", "map", "mark",
        "menu", "menuitem", "meta", "meter", "nav", "noscript", "object", "ol",
        "optgroup", "option", "output", "p", "param", "picture", "pre", "progress",
        "q", "rp", "rt", "ruby", "s", "samp", "script", "section",
        "select", "slot", "small", "source", "span", "strong", "style", "sub",
        "summary", "sup", "table", "tbody", "td", "template", "textarea", "tfoot",
        "th", "thead", "time", "title", "tr", "track", "u", "ul",
        "var", "video", "wbr", "frame", "frameset", "malignmark", "manifest", "rb",
        "rtc",
        # SVG
        "svg", "desc", "foreignobject", "image",
        # MathML
        "math", "mglyph", "mi", "mn", "mo", "ms", "mtext",
        # Legacy
        "acronym", "xmp", "applet", "annotation", "annotation-xml", "basefont",
        "bgsound", "big", "blink", "center", "font", "isindex", "listing",
        "marquee", "nobr", "noembed", "noframes", "plaintext", "scoped",
        "spacer", "strike", "tt",
    }
)  # fmt: skip

#: Attributes that render without a value when their value is empty.
BOOLEAN_ATTRIBUTE_NAMES: frozenset[str] = frozenset(
    {
        "allowfullscreen", "async", "autofocus", "autoplay", "checked",
        "controls", "default", "defer", "disabled", "disablepictureinpicture",
        "disableremoteplayback", "formnovalidate", "hidden", "inert", "ismap",
        "itemscope", "loop", "multiple", "muted", "nomodule", "novalidate",
        "open", "playsinline", "readonly", "required", "reversed", "selected",
    }
)  # fmt: skip

#: Attribute rewrites that apply to every element.
GLOBAL_ATTRIBUTE_REWRITES: dict[str, str] = {
    "accesskey": "accessKey",
    "autofocus": "autoFocus",
    "class": "className",
    "contenteditable": "contentEditable",
    "for": "htmlFor",
    "inputmode": "inputMode",
    "itemid": "itemID",
    "itemprop": "itemProp",
    "itemref": "itemRef",
    "itemscope": "itemScope",
    "itemtype": "itemType",
    "spellcheck": "spellCheck",
    "tabindex": "tabIndex",
    # Events
    "onabort": "onAbort",
    "onafterprint": "onAfterPrint",
    "onautocomplete": "onAutoComplete",
    "onautocompleteerror": "onAutoCompleteError",
    "onauxclick": "onAuxClick",
    "onbeforeprint": "onBeforePrint",
    "onbeforeunload": "onBeforeUnload",
    "onblur": "onBlur",
    "oncancel": "onCancel",
    "oncanplay": "onCanPlay",
    "oncanplaythrough": "onCanPlayThrough",
    "onchange": "onChange",
    "onclick": "onClick",
    "onclose": "onClose",
    "oncontextmenu": "onContextMenu",
    "oncopy": "onCopy",
    "oncuechange": "onCueChange",
    "oncut": "onCut",
    "ondblclick": "onDoubleClick",
    "ondrag": "onDrag",
    "ondragend": "onDragEnd",
    "ondragenter": "onDragEnter",
    "ondragexit": "onDragExit",
    "ondragleave": "onDragLeave",
    "ondragover": "onDragOver",
    "ondragstart": "onDragStart",
    "ondrop": "onDrop",
    "ondurationchange": "onDurationChange",
    "onemptied": "onEmptied",
    "onended": "onEnded",
    "onerror": "onError",
    "onfocus": "onFocus",
    "onhashchange": "onHashChange",
    "oninput": "onInput",
    "oninvalid": "onInvalid",
    "onkeydown": "onKeyDown",
    "onkeypress": "onKeyPress",
    "onkeyup": "onKeyUp",
    "onlanguagechange": "onLanguageChange",
    "onload": "onLoad",
    "onloadeddata": "onLoadedData",
    "onloadedmetadata": "onLoadedMetadata",
    "onloadend": "onLoadEnd",
    "onloadstart": "onLoadStart",
    "onmessage": "onMessage",
    "onmessageerror": "onMessageError",
    "onmousedown": "onMouseDown",
    "onmouseenter": "onMouseEnter",
    "onmouseleave": "onMouseLeave",
    "onmousemove": "onMouseMove",
    "onmouseout": "onMouseOut",
    "onmouseover": "onMouseOver",
    "onmouseup": "onMouseUp",
    "onmousewheel": "onMouseWheel",
    "onoffline": "onOffline",
    "ononline": "onOnline",
    "onpagehide": "onPageHide",
    "onpageshow": "onPageShow",
    "onpaste": "onPaste",
    "onpause": "onPause",
    "onplay": "onPlay",
    "onplaying": "onPlaying",
    "onpopstate": "onPopState",
    "onprogress": "onProgress",
    "onratechange": "onRateChange",
    "onrejectionhandled": "onRejectionHandled",
    "onreset": "onReset",
    "onresize": "onResize",
    "onscroll": "onScroll",
    "onsecuritypolicyviolation": "onSecurityPolicyViolation",
    "onseeked": "onSeeked",
    "onseeking": "onSeeking",
    "onselect": "onSelect",
    "onshow": "onShow",
    "onsort": "onSort",
    "onstalled": "onStalled",
    "onstorage": "onStorage",
    "onsubmit": "onSubmit",
    "onsuspend": "onSuspend",
    "ontimeupdate": "onTimeUpdate",
    "ontoggle": "onToggle",
    "onunhandledrejection": "onUnhandledRejection",
    "onunload": "onUnload",
    "onvolumechange": "onVolumeChange",
    "onwaiting": "onWaiting",
    "onwheel": "onWheel",
}


def atom_lookup(name: str) -> int:
    """Return the atom for *name*, or 0 if it is not a well-known name.

    The lookup is case-sensitive: atoms are registered for the canonical
    lower-case spelling only.
    """
    return _ATOMS.get(name, 0)


def atom_name(atom: int) -> str:
    """Return the canonical lower-case name of *atom* ("" for 0 or unknown ids)."""
    if 0 < atom <= len(_NAMES):
        return _NAMES[atom - 1]
    return ""


def is_common_element(atom: int) -> bool:
    """Return True if *atom* names a host element."""
    return atom in COMMON_ELEMENTS


def is_void_element(atom: int) -> bool:
    """Return True if *atom* names an element that cannot have children."""
    return atom in VOID_ELEMENTS


def is_boolean_attribute(atom: int) -> bool:
    """Return True if *atom* names an attribute that may be written without a value."""
    return atom in BOOLEAN_ATTRIBUTES


def global_rewrite(attr_atom: int) -> str | None:
    """Return the JSX name for an attribute valid on every element, if any."""
    return GLOBAL_REWRITES.get(attr_atom)


def tag_scoped_rewrite(element_atom: int, attr_atom: int) -> str | None:
    """Return the JSX name for an attribute that is only renamed on specific elements."""
    if element_atom not in SCOPED_REWRITE_ELEMENTS:
        return None
    return TAG_SCOPED_REWRITES.get(scoped_key(element_atom, attr_atom))


def scoped_key(element_atom: int, attr_atom: int) -> int:
    """Combine an element atom and an attribute atom into a tag-scoped table key."""
    return (element_atom << 32) | attr_atom


# ################
# Implementation
# ################

# (elements, attribute, JSX name); standard HTML attributes first, followed by
# React-specific and non-standard forms.
_TAG_SCOPED_SOURCE: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("form",), "accept-charset", "acceptCharset"),
    (("form",), "enctype", "encType"),
    (("form",), "novalidate", "noValidate"),
    (("form", "input", "select", "textarea", "video", "audio"), "autocomplete", "autoComplete"),
    (("td", "th"), "colspan", "colSpan"),
    (("td", "th"), "rowspan", "rowSpan"),
    (("textarea", "input"), "maxlength", "maxLength"),
    (("textarea", "input"), "minlength", "minLength"),
    (("textarea", "input"), "readonly", "readOnly"),
    (("img", "script", "link", "video", "audio", "area"), "crossorigin", "crossOrigin"),
    (("img", "link", "script", "a", "area", "iframe"), "referrerpolicy", "referrerPolicy"),
    (("iframe",), "srcdoc", "srcDoc"),
    (("iframe",), "allowfullscreen", "allowFullScreen"),
    (("ins", "del", "time"), "datetime", "dateTime"),
    (("track",), "srclang", "srcLang"),
    (("video", "audio"), "autoplay", "autoPlay"),
    (("video",), "playsinline", "playsInline"),
    (("button", "input"), "formaction", "formAction"),
    (("button", "input"), "formenctype", "formEncType"),
    (("button", "input"), "formmethod", "formMethod"),
    (("button", "input"), "formnovalidate", "formNoValidate"),
    (("button", "input"), "formtarget", "formTarget"),
    (("object", "img"), "usemap", "useMap"),
    (("script",), "nomodule", "noModule"),
    (("script", "meta", "a"), "charset", "charSet"),
    (("source", "img"), "srcset", "srcSet"),
    (("a", "link"), "hreflang", "hrefLang"),
    (("meta",), "http-equiv", "httpEquiv"),
    # React forms and widely supported non-standard attributes.
    (("input",), "defaultchecked", "defaultChecked"),
    (("input", "textarea", "select"), "defaultvalue", "defaultValue"),
    (("table",), "cellpadding", "cellPadding"),
    (("table",), "cellspacing", "cellSpacing"),
    (("img", "link", "script"), "fetchpriority", "fetchPriority"),
    (("link",), "imagesizes", "imageSizes"),
    (("link",), "imagesrcset", "imageSrcSet"),
    (("frame", "iframe"), "marginwidth", "marginWidth"),
    (("frame", "iframe"), "marginheight", "marginHeight"),
    (("frame", "iframe"), "frameborder", "frameBorder"),
    (("input", "button"), "popovertarget", "popoverTarget"),
    (("input", "button"), "popovertargetaction", "popoverTargetAction"),
    (("input", "textarea", "form"), "autocapitalize", "autoCapitalize"),
    (("input",), "autosave", "autoSave"),
    (("textarea",), "autocorrect", "autoCorrect"),
    (("object",), "classid", "classID"),
    (("video", "audio"), "controlslist", "controlsList"),
    (("video",), "disablepictureinpicture", "disablePictureInPicture"),
    (("video", "audio"), "disableremoteplayback", "disableRemotePlayback"),
)

_OTHER_ATTRIBUTE_NAMES: frozenset[str] = frozenset(
    {
        "accept", "action", "allow", "alt", "async", "checked", "cite", "cols",
        "content", "controls", "coords", "data", "decoding", "default", "defer",
        "dir", "disabled", "download", "draggable", "form", "headers", "height",
        "hidden", "high", "href", "id", "inert", "integrity", "ismap", "kind",
        "label", "lang", "list", "loading", "loop", "low", "max", "media", "method",
        "min", "multiple", "muted", "name", "open", "optimum", "pattern",
        "placeholder", "poster", "preload", "rel", "required", "reversed", "role",
        "rows", "sandbox", "scope", "selected", "shape", "size", "sizes", "slot",
        "span", "src", "start", "step", "style", "summary", "target", "title",
        "translate", "type", "value", "width", "wrap",
    }
)  # fmt: skip


def _all_names() -> tuple[str, ...]:
    names: set[str] = set()
    names.update(COMMON_ELEMENT_NAMES, VOID_ELEMENT_NAMES, PREFORMATTED_ELEMENT_NAMES)
    names.update(BOOLEAN_ATTRIBUTE_NAMES, GLOBAL_ATTRIBUTE_REWRITES, _OTHER_ATTRIBUTE_NAMES)
    for elements, attr, _ in _TAG_SCOPED_SOURCE:
        names.update(elements)
        names.add(attr)
    return tuple(sorted(names))


_NAMES: tuple[str, ...] = _all_names()
_ATOMS: dict[str, int] = {name: index + 1 for index, name in enumerate(_NAMES)}

COMMON_ELEMENTS: frozenset[int] = frozenset(_ATOMS[n] for n in COMMON_ELEMENT_NAMES)
VOID_ELEMENTS: frozenset[int] = frozenset(_ATOMS[n] for n in VOID_ELEMENT_NAMES)
PREFORMATTED_ELEMENTS: frozenset[int] = frozenset(_ATOMS[n] for n in PREFORMATTED_ELEMENT_NAMES)
BOOLEAN_ATTRIBUTES: frozenset[int] = frozenset(_ATOMS[n] for n in BOOLEAN_ATTRIBUTE_NAMES)
GLOBAL_REWRITES: dict[int, str] = {_ATOMS[k]: v for k, v in GLOBAL_ATTRIBUTE_REWRITES.items()}
TAG_SCOPED_REWRITES: dict[int, str] = {
    scoped_key(_ATOMS[element], _ATOMS[attr]): jsx
    for elements, attr, jsx in _TAG_SCOPED_SOURCE
    for element in elements
}
SCOPED_REWRITE_ELEMENTS: frozenset[int] = frozenset(key >> 32 for key in TAG_SCOPED_REWRITES)
