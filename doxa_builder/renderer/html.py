"""
Renderer HTML : présentation (mode lecture) de chaque type de bloc.

Dispatch exhaustif par isinstance sur l'union des blocs ; un bloc de type
inconnu rend un message visible au lieu de faire échouer la page.
Les `styles` du bloc sont fusionnés sur le conteneur (attribut style).
"""
import logging
import re
from html import escape
from urllib.parse import quote
from typing import Any, Dict, List, Mapping, Optional

from ..blocks import (
    BannersBlock,
    BaseBlock,
    CardItem,
    CardsBlock,
    CTABlock,
    FeaturesBlock,
    HeadingBlock,
    HeroBlock,
    ImageBlock,
    InvalidBlock,
    PilgrimagesBlock,
    TextBlock,
    UnknownBlock,
)
from ..exceptions import CollaboratorError
from ..feed import Pilgrimage, PilgrimageFeed, PilgrimageFilters

log = logging.getLogger(__name__)

UNKNOWN_MESSAGE = "unknown section type: {type}"
INVALID_MESSAGE = "invalid content for section type: {type}"
FEED_CARDS = 6

_CAMEL = re.compile(r"(?<!^)([A-Z])")


def _e(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def css_url(value: str) -> str:
    """URL sûre dans url('...') : quotes, parenthèses, antislash et blancs encodés."""
    return quote(value.strip(), safe=":/?#[]@!$&*+,;=%~.-_")


# ── Styles ──────────────────────────────────────────────────────────────────

def css_declarations(styles: Optional[Mapping[str, Any]]) -> List[str]:
    """{"paddingTop": "2rem"} → ["padding-top:2rem"] ; valeurs vides ignorées."""
    out = []
    for key, value in (styles or {}).items():
        if value is None or value == "":
            continue
        prop = _CAMEL.sub(r"-\1", key).replace("_", "-").lower()
        out.append(f"{prop}:{value}")
    return out


def style_attr(*parts: Any, styles: Optional[Mapping[str, Any]] = None) -> str:
    decls = [p for p in parts if p] + css_declarations(styles)
    return f' style="{_e(";".join(decls))}"' if decls else ""


# ── Dispatch ────────────────────────────────────────────────────────────────

def render_block(block: BaseBlock, feed: Optional[PilgrimageFeed] = None) -> str:
    """Présentation d'un bloc, styles du bloc fusionnés sur son conteneur."""
    if isinstance(block, HeadingBlock):     return render_heading(block)
    if isinstance(block, TextBlock):        return render_text(block)
    if isinstance(block, ImageBlock):       return render_image(block)
    if isinstance(block, HeroBlock):        return render_hero(block)
    if isinstance(block, CardsBlock):       return render_cards(block, feed)
    if isinstance(block, FeaturesBlock):    return render_features(block)
    if isinstance(block, BannersBlock):     return render_banners(block)
    if isinstance(block, CTABlock):         return render_cta(block)
    if isinstance(block, PilgrimagesBlock): return render_pilgrimages(block, feed)
    if isinstance(block, InvalidBlock):     return render_invalid(block)
    return render_unknown(block)


def render_unknown(block: BaseBlock) -> str:
    log.warning("Bloc %s de type inconnu %r rendu en placeholder", block.id, block.type)
    message = UNKNOWN_MESSAGE.format(type=block.type)
    return f'<div class="doxa-block doxa-block--unknown" role="alert">{_e(message)}</div>'


def render_invalid(block: InvalidBlock) -> str:
    log.warning("Bloc %s (%s) au contenu illisible rendu en placeholder", block.id, block.type)
    message = INVALID_MESSAGE.format(type=block.type)
    return f'<div class="doxa-block doxa-block--unknown" role="alert">{_e(message)}</div>'


# ── Blocs simples ───────────────────────────────────────────────────────────

def render_heading(b: HeadingBlock) -> str:
    c = b.content
    style = style_attr(f"font-size:{c.size}px", f"color:{c.color}", f"text-align:{c.alignment}", styles=b.styles)
    return f'<h2 class="doxa-block doxa-heading"{style}>{_e(c.text)}</h2>'


def render_text(b: TextBlock) -> str:
    c = b.content
    style = style_attr(
        f"font-size:{c.size}px", f"color:{c.color}", f"text-align:{c.alignment}",
        f"line-height:{c.line_height}", styles=b.styles,
    )
    paragraphs = "".join(f"<p>{_e(p)}</p>" for p in c.text.split("\n") if p.strip())
    return f'<div class="doxa-block doxa-text"{style}>{paragraphs}</div>'


def render_image(b: ImageBlock) -> str:
    c = b.content
    style = style_attr(f"text-align:{c.alignment}", styles=b.styles)
    if not c.url:
        return f'<figure class="doxa-block doxa-image doxa-image--empty"{style}><span>Nicio imagine selectată</span></figure>'
    return (f'<figure class="doxa-block doxa-image"{style}>'
            f'<img src="{_e(c.url)}" alt="{_e(c.alt)}" style="width:{c.width}%"></figure>')


def render_hero(b: HeroBlock) -> str:
    c = b.content
    parts = [f"min-height:{c.height}px"]
    if c.background_image:
        parts.append(f"background-image:url('{css_url(c.background_image)}')")
    style = style_attr(*parts, styles=b.styles)

    overlay = ""
    if c.show_overlay:
        overlay = (f'<div class="doxa-hero__overlay" '
                   f'style="background:{_e(c.overlay_color)};opacity:{c.overlay_opacity / 100:g}"></div>')

    search = ""
    if c.show_search_filter:
        search = """
    <form class="doxa-hero__search" method="get" action="/pilgrimages">
      <input type="text" name="location" placeholder="Locație">
      <input type="text" name="month" placeholder="Luna">
      <button type="submit">Caută</button>
    </form>"""

    subtitle = f'\n    <p class="doxa-hero__subtitle">{_e(c.subtitle)}</p>' if c.subtitle else ""
    return f"""<section class="doxa-block doxa-hero"{style}>
  {overlay}
  <div class="doxa-hero__content">
    <h1 class="doxa-hero__title">{_e(c.title)}</h1>{subtitle}{search}
  </div>
</section>"""


def _section_header(title: str, subtitle: str) -> str:
    out = f'<h2 class="doxa-section__title">{_e(title)}</h2>' if title else ""
    if subtitle:
        out += f'\n  <p class="doxa-section__subtitle">{_e(subtitle)}</p>'
    return out


# ── Blocs à listes ──────────────────────────────────────────────────────────

def _card_html(card: CardItem, extra: str = "") -> str:
    img = f'<img src="{_e(card.image_url)}" alt="{_e(card.title)}" class="doxa-card__image">' if card.image_url else ""
    return f"""<div class="doxa-card">
    {img}<h3 class="doxa-card__title">{_e(card.title)}</h3>
    <p class="doxa-card__description">{_e(card.description)}</p>{extra}
  </div>"""


def _cards_from_feed(feed: Optional[PilgrimageFeed]) -> List[CardItem]:
    if feed is None:
        return []
    return [
        CardItem(title=p.title, description=p.description, image_url=p.cover)
        for p in feed.list()[:FEED_CARDS]
    ]


def render_cards(b: CardsBlock, feed: Optional[PilgrimageFeed] = None) -> str:
    c = b.content
    cards = c.cards
    if c.from_feed:
        try:
            cards = _cards_from_feed(feed)
        except CollaboratorError as e:
            log.warning("Cartes du bloc %s : flux indisponible (%s)", b.id, e)
            cards = []
    items = "\n  ".join(_card_html(card) for card in cards)
    return f"""<section class="doxa-block doxa-cards"{style_attr(styles=b.styles)}>
  {_section_header(c.title, c.subtitle)}
  <div class="doxa-cards__grid">
  {items}
  </div>
</section>"""


def render_features(b: FeaturesBlock) -> str:
    c = b.content
    items = "".join(
        f"""
    <div class="doxa-feature">
      {f'<span class="doxa-feature__icon">{_e(f.icon)}</span>' if f.icon else ''}
      <h3 class="doxa-feature__title">{_e(f.title)}</h3>
      <p class="doxa-feature__description">{_e(f.description)}</p>
    </div>"""
        for f in c.features
    )
    return f"""<section class="doxa-block doxa-features"{style_attr(styles=b.styles)}>
  {_section_header(c.title, c.subtitle)}
  <div class="doxa-features__grid">{items}
  </div>
</section>"""


def render_banners(b: BannersBlock) -> str:
    c = b.content
    slides = []
    for item in c.banners:
        inner = f'<img src="{_e(item.image)}" alt="{_e(item.title)}">' if item.image else ""
        if item.title:
            inner += f'<h3 class="doxa-banner__title">{_e(item.title)}</h3>'
        if item.description:
            inner += f'<p class="doxa-banner__description">{_e(item.description)}</p>'
        if item.link_url:
            inner = f'<a href="{_e(item.link_url)}">{inner}</a>'
        slides.append(f'<div class="doxa-banner">{inner}</div>')
    body = "\n    ".join(slides) or '<p class="doxa-banners__empty">Nu există bannere.</p>'
    return f"""<section class="doxa-block doxa-banners doxa-banners--{c.display_type}"{style_attr(styles=b.styles)}>
  {_section_header(c.title, c.subtitle)}
  <div class="doxa-banners__track">
    {body}
  </div>
</section>"""


def render_cta(b: CTABlock) -> str:
    c = b.content
    style = style_attr(f"background:{c.background_color}", f"color:{c.text_color}", styles=b.styles)
    button = f'\n  <a href="{_e(c.button_url)}" class="doxa-btn doxa-btn--primary">{_e(c.button_text)}</a>' if c.button_text else ""
    subtitle = f'\n  <p class="doxa-cta__subtitle">{_e(c.subtitle)}</p>' if c.subtitle else ""
    return f"""<section class="doxa-block doxa-cta"{style}>
  <h2 class="doxa-cta__title">{_e(c.title)}</h2>{subtitle}{button}
</section>"""


# ── Pèlerinages (flux externe) ──────────────────────────────────────────────

def _pilgrimage_card(p: Pilgrimage) -> str:
    dates = ""
    if p.start_date:
        dates = p.start_date.strftime("%d.%m.%Y")
        if p.end_date:
            dates += f" – {p.end_date.strftime('%d.%m.%Y')}"
    badges = ""
    if p.featured:
        badges += '<span class="doxa-badge doxa-badge--featured">Recomandat</span>'
    if p.verified:
        badges += '<span class="doxa-badge doxa-badge--verified">Verificat</span>'
    extra = (f'\n    <p class="doxa-card__meta">{_e(p.location)}'
             f'{" · " + _e(dates) if dates else ""}</p>'
             f'\n    <p class="doxa-card__price">{p.price:g} {_e(p.currency)}</p>'
             f'\n    <a href="/pilgrimages/{p.id}" class="doxa-btn">Detalii</a>')
    card = CardItem(title=p.title, description=p.description, image_url=p.cover)
    return _card_html(card, f"\n    {badges}{extra}" if badges else extra)


def render_pilgrimages(b: PilgrimagesBlock, feed: Optional[PilgrimageFeed] = None) -> str:
    """Liste live tirée du flux : jamais stockée dans le bloc."""
    c = b.content
    style = style_attr(
        f"background:{c.background_color}" if c.background_color else "",
        f"color:{c.text_color}" if c.text_color else "",
        styles=b.styles,
    )
    filters = PilgrimageFilters(promoted=True) if c.show_promoted else None
    body = '<p class="doxa-pilgrimages__empty">Nu există pelerinaje disponibile.</p>'
    if feed is not None:
        try:
            items = feed.list(filters)[:c.count]
        except CollaboratorError as e:
            log.warning("Bloc %s : flux pèlerinages indisponible (%s)", b.id, e)
            body = '<p class="doxa-pilgrimages__error">Nu s-au putut încărca pelerinajele.</p>'
        else:
            if items:
                body = "\n  ".join(_pilgrimage_card(p) for p in items)
    return f"""<section class="doxa-block doxa-pilgrimages"{style}>
  {_section_header(c.title, c.subtitle)}
  <div class="doxa-cards__grid">
  {body}
  </div>
</section>"""


def block_class_name(block: BaseBlock) -> str:
    return "doxa-block--unknown" if isinstance(block, UnknownBlock) else f"doxa-block--{block.type}"


def render_attrs(attrs: Dict[str, Any]) -> str:
    return "".join(f' {k}="{_e(v)}"' for k, v in attrs.items() if v is not None)
