"""
Rule catalog for the finding enricher.

Static, immutable metadata keyed by audit rule id (Lighthouse/axe ids plus the
synthesized pdf/vendor rules). Every user-facing "why this matters" string the
scanner emits comes from here.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional


@dataclass(frozen=True)
class RuleMetadata:
    check: str
    impact: str
    remediation: str
    manager_guidance: str
    developer_guidance: str
    wcag_criterion: Optional[str] = None
    wcag_name: Optional[str] = None
    wcag_level: Optional[str] = None
    wcag_principle: Optional[str] = None


PERCEIVABLE = "Perceivable"
OPERABLE = "Operable"
UNDERSTANDABLE = "Understandable"
ROBUST = "Robust"


GENERIC_RULE = RuleMetadata(
    check="Accessibility Check",
    impact="Some patients using assistive technology may have difficulty using this part of your website.",
    remediation="Review the flagged elements against WCAG 2.1 AA and correct the markup.",
    manager_guidance="Share this item with your web developer or website vendor and ask them to review it against WCAG 2.1 AA.",
    developer_guidance="Inspect the flagged elements with an accessibility tool (axe DevTools, Lighthouse) and fix the reported rule violation.",
)


_RULES = {
    "image-alt": RuleMetadata(
        check="Image Alt Text",
        wcag_criterion="1.1.1",
        wcag_name="Non-text Content",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Blind patients using screen readers hear nothing, or just a file name, where your images are.",
        remediation="Add a descriptive alt attribute to every meaningful image, and alt=\"\" to decorative ones.",
        manager_guidance="Ask whoever updates your website to add a short text description to each photo, logo and graphic. Decorative images can be marked as such.",
        developer_guidance="Add alt text to each <img>. Use alt=\"\" (empty) for purely decorative images so assistive technology skips them.",
    ),
    "input-image-alt": RuleMetadata(
        check="Image Button Text",
        wcag_criterion="1.1.1",
        wcag_name="Non-text Content",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Patients using screen readers cannot tell what an image button does.",
        remediation="Give every <input type=\"image\"> an alt attribute describing its action.",
        manager_guidance="Ask your developer to label the picture buttons on your site so screen readers can announce them.",
        developer_guidance="Add alt=\"Submit\" (or the relevant action) to each input[type=image].",
    ),
    "object-alt": RuleMetadata(
        check="Embedded Object Text",
        wcag_criterion="1.1.1",
        wcag_name="Non-text Content",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Embedded content is silent to screen reader users.",
        remediation="Provide alternative text for <object> elements.",
        manager_guidance="Ask your developer to add a text alternative for embedded media and documents.",
        developer_guidance="Add inner fallback text, aria-label or title to each <object>.",
    ),
    "svg-img-alt": RuleMetadata(
        check="SVG Image Text",
        wcag_criterion="1.1.1",
        wcag_name="Non-text Content",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Icons and graphics drawn as SVG are invisible to screen reader users.",
        remediation="Give SVG elements with role=\"img\" an accessible name.",
        manager_guidance="Ask your developer to label the icons on your website.",
        developer_guidance="Add a <title> child or aria-label to each <svg role=\"img\">.",
    ),
    "video-caption": RuleMetadata(
        check="Video Captions",
        wcag_criterion="1.2.2",
        wcag_name="Captions (Prerecorded)",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Deaf and hard-of-hearing patients cannot follow your videos.",
        remediation="Provide synchronized captions for all prerecorded video with audio.",
        manager_guidance="Make sure every video on your site has captions. Most video hosts can generate them, but review them for accuracy.",
        developer_guidance="Add a <track kind=\"captions\"> element to each <video>, or use a player with caption support.",
    ),
    "label": RuleMetadata(
        check="Form Labels",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Patients using screen readers cannot tell what information each form field expects, blocking appointment requests and intake forms.",
        remediation="Associate a visible <label> with every form input.",
        manager_guidance="Your online forms have fields without names that screen readers can read. Ask your developer or form vendor to label every field.",
        developer_guidance="Use <label for=\"id\"> matching each input's id, or wrap the input in its label. aria-label is an acceptable fallback.",
    ),
    "form-field-multiple-labels": RuleMetadata(
        check="Conflicting Form Labels",
        wcag_criterion="3.3.2",
        wcag_name="Labels or Instructions",
        wcag_level="A",
        wcag_principle=UNDERSTANDABLE,
        impact="Screen readers may announce the wrong label, confusing patients filling out forms.",
        remediation="Ensure each form field has exactly one label.",
        manager_guidance="Ask your developer to remove duplicate labels from your form fields.",
        developer_guidance="Remove extra <label> elements so each control has a single accessible name.",
    ),
    "select-name": RuleMetadata(
        check="Dropdown Labels",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Patients cannot tell what a dropdown menu is asking for.",
        remediation="Give every <select> element an associated label.",
        manager_guidance="Ask your developer to label all dropdown menus in your forms.",
        developer_guidance="Associate a <label> or aria-label with each <select>.",
    ),
    "heading-order": RuleMetadata(
        check="Heading Order",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Screen reader users navigate by headings; skipped levels make the page structure confusing.",
        remediation="Use heading levels in order without skipping (h1, then h2, then h3).",
        manager_guidance="Ask your developer to make sure page headings follow a logical outline.",
        developer_guidance="Fix heading levels so they only increase by one, and do not use headings purely for styling.",
    ),
    "page-has-heading-one": RuleMetadata(
        check="Page Heading",
        wcag_criterion="2.4.6",
        wcag_name="Headings and Labels",
        wcag_level="AA",
        wcag_principle=OPERABLE,
        impact="Without a main heading, screen reader users cannot quickly find what the page is about.",
        remediation="Add a single <h1> that describes the page's main purpose.",
        manager_guidance="Every page should have one main title. Ask your developer to add one where it is missing.",
        developer_guidance="Add one <h1> per page describing its primary content.",
    ),
    "list": RuleMetadata(
        check="List Structure",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Lists are announced incorrectly, so patients lose track of items such as services or office hours.",
        remediation="Only place <li>, <script> or <template> elements directly inside <ul> and <ol>.",
        manager_guidance="Ask your developer to fix the structure of lists on your pages.",
        developer_guidance="Ensure <ul>/<ol> contain only <li>, <script> or <template> children.",
    ),
    "listitem": RuleMetadata(
        check="List Items",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="List items outside of a list are announced without context.",
        remediation="Wrap <li> elements in a <ul> or <ol>.",
        manager_guidance="Ask your developer to fix the structure of lists on your pages.",
        developer_guidance="Ensure every <li> has a <ul>, <ol> or <menu> parent.",
    ),
    "td-headers-attr": RuleMetadata(
        check="Table Headers",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Tables such as fee schedules or office hours cannot be understood with a screen reader.",
        remediation="Make headers attributes reference header cells in the same table.",
        manager_guidance="Ask your developer to review the data tables on your website.",
        developer_guidance="Fix td[headers] references so they point to th cells in the same table.",
    ),
    "th-has-data-cells": RuleMetadata(
        check="Table Header Cells",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Table headers that describe nothing confuse screen reader navigation.",
        remediation="Ensure each table header describes data cells.",
        manager_guidance="Ask your developer to review the data tables on your website.",
        developer_guidance="Remove empty header columns or associate data cells with each <th>.",
    ),
    "link-in-text-block": RuleMetadata(
        check="Link Distinguishability",
        wcag_criterion="1.4.1",
        wcag_name="Use of Color",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Patients with color blindness cannot tell links apart from surrounding text.",
        remediation="Distinguish links by more than color, e.g. with an underline.",
        manager_guidance="Ask your developer to underline links inside paragraphs.",
        developer_guidance="Add text-decoration or another non-color cue to inline links.",
    ),
    "color-contrast": RuleMetadata(
        check="Color Contrast",
        wcag_criterion="1.4.3",
        wcag_name="Contrast (Minimum)",
        wcag_level="AA",
        wcag_principle=PERCEIVABLE,
        impact="Patients with low vision, including many older patients, cannot read low-contrast text.",
        remediation="Ensure text has a contrast ratio of at least 4.5:1 (3:1 for large text).",
        manager_guidance="Some text on your site is too faint to read for patients with low vision. Ask your designer to darken text or lighten backgrounds.",
        developer_guidance="Adjust foreground/background colors to meet 4.5:1 for body text and 3:1 for large text. Check with a contrast checker.",
    ),
    "meta-viewport": RuleMetadata(
        check="Zoom Disabled",
        wcag_criterion="1.4.4",
        wcag_name="Resize Text",
        wcag_level="AA",
        wcag_principle=PERCEIVABLE,
        impact="Patients with low vision cannot zoom in on their phones to read your content.",
        remediation="Remove user-scalable=no and maximum-scale below 5 from the viewport meta tag.",
        manager_guidance="Your website prevents patients from zooming in on mobile. Ask your developer to allow zoom.",
        developer_guidance="Remove user-scalable=no and keep maximum-scale at 5 or higher in <meta name=\"viewport\">.",
    ),
    "meta-refresh": RuleMetadata(
        check="Timed Refresh",
        wcag_criterion="2.2.1",
        wcag_name="Timing Adjustable",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Pages that refresh automatically interrupt patients who need more time to read.",
        remediation="Remove <meta http-equiv=\"refresh\"> delays.",
        manager_guidance="Ask your developer to stop pages from reloading on their own.",
        developer_guidance="Remove meta refresh and use server-side redirects instead.",
    ),
    "bypass": RuleMetadata(
        check="Skip Navigation",
        wcag_criterion="2.4.1",
        wcag_name="Bypass Blocks",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Keyboard users must tab through the entire menu on every page before reaching content.",
        remediation="Provide a skip link, landmark regions or headings to bypass repeated content.",
        manager_guidance="Ask your developer to add a \"Skip to main content\" link.",
        developer_guidance="Add a skip link as the first focusable element and wrap content in <main>.",
    ),
    "document-title": RuleMetadata(
        check="Page Title",
        wcag_criterion="2.4.2",
        wcag_name="Page Titled",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Screen reader users hear the page title first; without one they cannot tell which page or tab they are on.",
        remediation="Give every page a unique, descriptive <title>.",
        manager_guidance="Each page needs a title, for example \"Book an Appointment | Smith Family Dental\".",
        developer_guidance="Add a non-empty <title> to each document, unique per page.",
    ),
    "tabindex": RuleMetadata(
        check="Focus Order",
        wcag_criterion="2.4.3",
        wcag_name="Focus Order",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Keyboard users jump around the page in an unpredictable order.",
        remediation="Avoid tabindex values greater than 0.",
        manager_guidance="Ask your developer to fix the keyboard navigation order of your pages.",
        developer_guidance="Replace positive tabindex values with 0 or -1 and fix DOM order instead.",
    ),
    "link-name": RuleMetadata(
        check="Empty Links",
        wcag_criterion="2.4.4",
        wcag_name="Link Purpose (In Context)",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Screen readers announce these links as just \"link\", so patients cannot tell where they lead.",
        remediation="Give every link discernible text, or an aria-label for icon-only links.",
        manager_guidance="Some links on your site, often social media icons, have no readable name. Ask your developer to label them.",
        developer_guidance="Add visible text, aria-label, or alt text on the linked image for each <a href>.",
    ),
    "identical-links-same-purpose": RuleMetadata(
        check="Consistent Link Text",
        wcag_criterion="2.4.9",
        wcag_name="Link Purpose (Link Only)",
        wcag_level="AAA",
        wcag_principle=OPERABLE,
        impact="Links with the same text going to different places confuse screen reader users.",
        remediation="Use distinct link text for links to different destinations.",
        manager_guidance="Avoid repeating \"Click here\" or \"Learn more\" for different pages.",
        developer_guidance="Make link text unique per destination, or add aria-label context.",
    ),
    "label-content-name-mismatch": RuleMetadata(
        check="Voice Control Labels",
        wcag_criterion="2.5.3",
        wcag_name="Label in Name",
        wcag_level="A",
        wcag_principle=OPERABLE,
        impact="Patients using voice control cannot activate controls by speaking the visible text.",
        remediation="Make the accessible name start with the visible label text.",
        manager_guidance="Ask your developer to make button labels match what is shown on screen.",
        developer_guidance="Ensure aria-label contains the visible text of the control.",
    ),
    "html-has-lang": RuleMetadata(
        check="Language Attribute",
        wcag_criterion="3.1.1",
        wcag_name="Language of Page",
        wcag_level="A",
        wcag_principle=UNDERSTANDABLE,
        impact="Screen readers may mispronounce your content, making it hard for patients to understand.",
        remediation="Add a lang attribute to the <html> element, e.g. <html lang=\"en\">.",
        manager_guidance="A one-line fix: ask your developer to declare your website's language.",
        developer_guidance="Set <html lang=\"en\"> (or the correct BCP 47 code) in the page template.",
    ),
    "html-lang-valid": RuleMetadata(
        check="Language Attribute Value",
        wcag_criterion="3.1.1",
        wcag_name="Language of Page",
        wcag_level="A",
        wcag_principle=UNDERSTANDABLE,
        impact="Screen readers cannot pick the right voice for an invalid language code.",
        remediation="Use a valid BCP 47 language code in the <html lang> attribute.",
        manager_guidance="Ask your developer to correct the language code of your website.",
        developer_guidance="Replace the lang value with a valid code such as \"en\" or \"es\".",
    ),
    "valid-lang": RuleMetadata(
        check="Language of Parts",
        wcag_criterion="3.1.2",
        wcag_name="Language of Parts",
        wcag_level="AA",
        wcag_principle=UNDERSTANDABLE,
        impact="Content in a second language, such as Spanish patient information, is read with the wrong pronunciation.",
        remediation="Use valid lang values on elements containing other languages.",
        manager_guidance="Ask your developer to mark sections written in other languages correctly.",
        developer_guidance="Fix invalid lang attributes on inner elements.",
    ),
    "button-name": RuleMetadata(
        check="Button Labels",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Screen readers announce these as just \"button\", so patients do not know what they do.",
        remediation="Give every button discernible text or an aria-label.",
        manager_guidance="Some buttons, like menu or search icons, have no readable name. Ask your developer to label them.",
        developer_guidance="Add inner text or aria-label to each <button> and role=button element.",
    ),
    "frame-title": RuleMetadata(
        check="Frame Titles",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Embedded maps, booking widgets and videos are announced without a name.",
        remediation="Add a descriptive title attribute to every <iframe>.",
        manager_guidance="Ask your developer to add titles to embedded widgets such as maps or scheduling tools.",
        developer_guidance="Add title=\"...\" describing the content of each <iframe>.",
    ),
    "aria-allowed-attr": RuleMetadata(
        check="ARIA Attributes",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Misused ARIA attributes make assistive technology describe elements incorrectly.",
        remediation="Only use ARIA attributes permitted for the element's role.",
        manager_guidance="Ask your developer to review ARIA usage on your site.",
        developer_guidance="Remove ARIA attributes not allowed for the element's role.",
    ),
    "aria-required-attr": RuleMetadata(
        check="Required ARIA Attributes",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Interactive widgets do not report their state to screen readers.",
        remediation="Provide all required ARIA attributes for each role.",
        manager_guidance="Ask your developer to review ARIA usage on your site.",
        developer_guidance="Add the attributes required by each role (e.g. aria-checked for role=checkbox).",
    ),
    "aria-valid-attr": RuleMetadata(
        check="Valid ARIA Attributes",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Misspelled ARIA attributes are ignored, leaving widgets unlabeled.",
        remediation="Fix misspelled or invalid aria-* attribute names.",
        manager_guidance="Ask your developer to review ARIA usage on your site.",
        developer_guidance="Check aria-* attribute names against the WAI-ARIA attribute list.",
    ),
    "aria-roles": RuleMetadata(
        check="ARIA Roles",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Invalid roles make assistive technology misreport page elements.",
        remediation="Use only valid ARIA role values.",
        manager_guidance="Ask your developer to review ARIA usage on your site.",
        developer_guidance="Replace invalid role values with valid WAI-ARIA roles.",
    ),
    "aria-hidden-focus": RuleMetadata(
        check="Hidden Focusable Content",
        wcag_criterion="4.1.2",
        wcag_name="Name, Role, Value",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Keyboard users can tab into content that screen readers say does not exist.",
        remediation="Do not place focusable elements inside aria-hidden containers.",
        manager_guidance="Ask your developer to fix hidden content that can still be reached with the keyboard.",
        developer_guidance="Add tabindex=\"-1\" to focusable descendants of aria-hidden=\"true\" or remove aria-hidden.",
    ),
    "duplicate-id-aria": RuleMetadata(
        check="Duplicate IDs",
        wcag_criterion="4.1.1",
        wcag_name="Parsing",
        wcag_level="A",
        wcag_principle=ROBUST,
        impact="Labels and descriptions may be attached to the wrong element.",
        remediation="Make ids referenced by ARIA or labels unique.",
        manager_guidance="Ask your developer to fix duplicate element ids.",
        developer_guidance="Ensure ids used in aria-labelledby, aria-describedby and label[for] are unique.",
    ),
    "is-on-https": RuleMetadata(
        check="SSL/HTTPS",
        impact="Patient data submitted through forms is sent unencrypted, and browsers flag the site as \"Not secure\".",
        remediation="Serve the entire site over HTTPS and redirect HTTP requests.",
        manager_guidance="Secure connections (HTTPS) are required for healthcare websites to protect patient data. Ask your hosting provider to enable SSL.",
        developer_guidance="Install a TLS certificate, redirect all HTTP traffic to HTTPS and enable HSTS.",
    ),
    "inaccessible-pdfs": RuleMetadata(
        check="PDF Documents",
        wcag_criterion="1.3.1",
        wcag_name="Info and Relationships",
        wcag_level="A",
        wcag_principle=PERCEIVABLE,
        impact="Blind patients cannot read untagged intake forms, consent documents or patient education PDFs. Inaccessible PDFs are a common Section 504 complaint.",
        remediation="Tag the PDFs (structure tags, document language, title) or replace critical forms with accessible HTML forms.",
        manager_guidance="Patient forms posted as PDFs must be readable by screen readers. Ask your vendor to remediate them, or offer the forms as online web forms instead.",
        developer_guidance="Run the documents through Acrobat's accessibility checker, add tags, a /Lang entry and a document title, or convert forms to HTML.",
    ),
    "third-party-vendors": RuleMetadata(
        check="Third-Party Services",
        impact="Patients may be unable to book, pay or check in if an embedded vendor tool is inaccessible, and your practice remains responsible.",
        remediation="Request a VPAT/ACR from each vendor and confirm WCAG 2.1 AA conformance.",
        manager_guidance="Your website uses outside tools for scheduling, forms or portals. Email each vendor for their accessibility documentation (VPAT).",
        developer_guidance="Audit embedded third-party widgets with a screen reader and keyboard, and document any vendor barriers.",
    ),
}

RULE_CATALOG = MappingProxyType(_RULES)


def get_rule(rule_id: str) -> RuleMetadata:
    return RULE_CATALOG.get(rule_id, GENERIC_RULE)
