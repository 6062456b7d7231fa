from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

from .errors import UnknownSectionTypeError

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

FIELD_KINDS: Sequence[str] = (
    "string",
    "text",
    "email",
    "url",
    "enum",
    "boolean",
    "integer",
    "array",
    "hexColor",
    "object",
)


@dataclass(frozen=True)
class FieldRule:
    kind: str
    required: bool = False
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    allowed_values: Sequence[str] = ()
    minimum: int | None = None
    maximum: int | None = None
    # array of objects
    item_schema: Mapping[str, "FieldRule"] | None = None
    # array of scalars
    item_kind: str | None = None
    # nested object
    properties: Mapping[str, "FieldRule"] | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unsupported field kind: {self.kind}")


@dataclass(frozen=True)
class SectionTypeDefinition:
    type: str
    display_name: str
    description: str
    default_content: Mapping[str, Any]
    content_schema: Mapping[str, FieldRule]

    def new_content(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fresh copy of the default payload with ``overrides`` laid over the top level."""
        content = copy.deepcopy(dict(self.default_content))
        if overrides:
            content.update(copy.deepcopy(dict(overrides)))
        return content

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.content_schema)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(name for name, rule in self.content_schema.items() if rule.required)


def _schema(**rules: FieldRule) -> Mapping[str, FieldRule]:
    return MappingProxyType(dict(rules))


def _text(max_length: int, *, required: bool = False, kind: str = "string") -> FieldRule:
    return FieldRule(kind=kind, max_length=max_length, required=required)


AVAILABLE_ICONS: Sequence[str] = (
    "rocket",
    "star",
    "heart",
    "check",
    "shield",
    "lightning",
    "globe",
    "users",
    "clock",
    "chart",
    "lock",
    "cloud",
    "code",
    "mobile",
    "settings",
    "support",
    "book",
    "gift",
)

SOCIAL_PLATFORMS: Sequence[str] = ("twitter", "facebook", "instagram", "linkedin", "github")

NAVIGATION_STYLES: Sequence[str] = ("fixed-top", "sticky", "static", "transparent")

THEME_COLOR_FIELDS: Sequence[str] = (
    "primaryColor",
    "secondaryColor",
    "backgroundColor",
    "textColor",
)


THEME_PRESETS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "blue": MappingProxyType(
            {
                "name": "Ocean Blue",
                "primaryColor": "#3B82F6",
                "secondaryColor": "#10B981",
                "backgroundColor": "#FFFFFF",
                "textColor": "#1F2937",
            }
        ),
        "purple": MappingProxyType(
            {
                "name": "Royal Purple",
                "primaryColor": "#8B5CF6",
                "secondaryColor": "#EC4899",
                "backgroundColor": "#FFFFFF",
                "textColor": "#1F2937",
            }
        ),
        "green": MappingProxyType(
            {
                "name": "Forest Green",
                "primaryColor": "#10B981",
                "secondaryColor": "#3B82F6",
                "backgroundColor": "#FFFFFF",
                "textColor": "#1F2937",
            }
        ),
        "dark": MappingProxyType(
            {
                "name": "Dark Mode",
                "primaryColor": "#60A5FA",
                "secondaryColor": "#34D399",
                "backgroundColor": "#111827",
                "textColor": "#F9FAFB",
            }
        ),
        "sunset": MappingProxyType(
            {
                "name": "Sunset",
                "primaryColor": "#F59E0B",
                "secondaryColor": "#EF4444",
                "backgroundColor": "#FFFBEB",
                "textColor": "#1F2937",
            }
        ),
    }
)

DEFAULT_THEME_PRESET = "blue"
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_SITE_NAME = "My Website"


DEFAULT_SECTION_TYPES: Mapping[str, SectionTypeDefinition] = {
    "hero": SectionTypeDefinition(
        type="hero",
        display_name="Hero Banner",
        description="Main hero section with headline, subheadline, and call-to-action",
        default_content={
            "headline": "Build Something Amazing",
            "subheadline": "Create beautiful websites with AI assistance in minutes",
            "ctaText": "Get Started",
            "ctaLink": "#contact",
            "backgroundImage": None,
            "backgroundColorStart": None,
            "backgroundColorEnd": None,
        },
        content_schema=_schema(
            headline=_text(100, required=True),
            subheadline=_text(300),
            ctaText=_text(30),
            ctaLink=_text(200),
            backgroundImage=FieldRule(kind="url"),
            backgroundColorStart=FieldRule(
                kind="hexColor", description="Gradient start color in hex format (e.g., #000000)"
            ),
            backgroundColorEnd=FieldRule(
                kind="hexColor", description="Gradient end color in hex format (e.g., #1a1a1a)"
            ),
        ),
    ),
    "features": SectionTypeDefinition(
        type="features",
        display_name="Features",
        description="Feature grid showcasing product capabilities",
        default_content={
            "title": "Features",
            "subtitle": "Everything you need to succeed",
            "items": [
                {"icon": "rocket", "title": "Fast", "description": "Lightning-fast performance"},
                {"icon": "shield", "title": "Secure", "description": "Enterprise-grade security"},
                {"icon": "support", "title": "Support", "description": "24/7 customer support"},
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            items=FieldRule(
                kind="array",
                min_items=1,
                max_items=6,
                item_schema=_schema(
                    icon=FieldRule(kind="enum", allowed_values=AVAILABLE_ICONS, required=True),
                    title=_text(50, required=True),
                    description=_text(150, required=True),
                ),
            ),
        ),
    ),
    "about": SectionTypeDefinition(
        type="about",
        display_name="About",
        description="About section with text and optional image",
        default_content={
            "title": "About Us",
            "content": "We are a team dedicated to making website creation simple and accessible for everyone.",
            "image": None,
            "imagePosition": "right",
        },
        content_schema=_schema(
            title=_text(100, required=True),
            content=_text(1000, required=True, kind="text"),
            image=FieldRule(kind="url"),
            imagePosition=FieldRule(kind="enum", allowed_values=("left", "right")),
        ),
    ),
    "story": SectionTypeDefinition(
        type="story",
        display_name="Our Story",
        description="Company story with rich text, an image, and highlight statistics",
        default_content={
            "title": "Our Story",
            "content": "<p>We started with a simple mission: to provide exceptional service to our community.</p>",
            "image": None,
            "imagePosition": "right",
            "highlights": [
                {"label": "Years Experience", "value": "10+"},
                {"label": "Happy Clients", "value": "500+"},
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            content=_text(2000, required=True, kind="text"),
            image=FieldRule(kind="url"),
            imagePosition=FieldRule(kind="enum", allowed_values=("left", "right")),
            highlights=FieldRule(
                kind="array",
                max_items=6,
                item_schema=_schema(
                    label=_text(50, required=True),
                    value=_text(20, required=True),
                ),
            ),
        ),
    ),
    "services": SectionTypeDefinition(
        type="services",
        display_name="Services",
        description="Service offerings with descriptions, optional prices, and links",
        default_content={
            "title": "What We Offer",
            "subtitle": "Comprehensive services to meet all your needs",
            "items": [
                {
                    "icon": "settings",
                    "title": "Consulting",
                    "description": "Expert guidance tailored to your goals.",
                    "price": None,
                    "ctaText": "Learn More",
                    "ctaLink": "#contact",
                },
                {
                    "icon": "support",
                    "title": "Support",
                    "description": "Ongoing help whenever you need it.",
                    "price": None,
                    "ctaText": "Learn More",
                    "ctaLink": "#contact",
                },
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            items=FieldRule(
                kind="array",
                min_items=1,
                max_items=6,
                item_schema=_schema(
                    icon=_text(30, required=True),
                    title=_text(50, required=True),
                    description=_text(300, required=True),
                    price=_text(20),
                    ctaText=_text(30),
                    ctaLink=_text(200),
                ),
            ),
        ),
    ),
    "team": SectionTypeDefinition(
        type="team",
        display_name="Team",
        description="Team member cards with photo, role, and short bio",
        default_content={
            "title": "Meet Our Team",
            "subtitle": "The people behind our success",
            "members": [
                {
                    "name": "Alex Morgan",
                    "role": "Founder",
                    "bio": "Started the company to make a difference.",
                    "photo": None,
                    "email": None,
                    "linkedin": None,
                }
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            members=FieldRule(
                kind="array",
                min_items=1,
                max_items=12,
                item_schema=_schema(
                    name=_text(100, required=True),
                    role=_text(100),
                    bio=_text(500, kind="text"),
                    photo=FieldRule(kind="url"),
                    email=FieldRule(kind="email"),
                    linkedin=FieldRule(kind="url"),
                ),
            ),
        ),
    ),
    "gallery": SectionTypeDefinition(
        type="gallery",
        display_name="Gallery",
        description="Image grid showcasing work or products",
        default_content={
            "title": "Gallery",
            "subtitle": "A look at our recent work",
            "columns": 3,
            "images": [
                {
                    "url": "https://placehold.co/400x400/3B82F6/white?text=Project+1",
                    "caption": "Project 1",
                    "alt": "Project image",
                },
                {
                    "url": "https://placehold.co/400x400/10B981/white?text=Project+2",
                    "caption": "Project 2",
                    "alt": "Project image",
                },
                {
                    "url": "https://placehold.co/400x400/8B5CF6/white?text=Project+3",
                    "caption": "Project 3",
                    "alt": "Project image",
                },
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            columns=FieldRule(kind="integer", minimum=1, maximum=6),
            images=FieldRule(
                kind="array",
                min_items=1,
                max_items=24,
                item_schema=_schema(
                    url=FieldRule(kind="url", required=True),
                    caption=_text(100),
                    alt=_text(150),
                ),
            ),
        ),
    ),
    "testimonials": SectionTypeDefinition(
        type="testimonials",
        display_name="Testimonials",
        description="Customer testimonials and reviews",
        default_content={
            "title": "What Our Customers Say",
            "items": [
                {
                    "quote": "This product changed how we do business. Highly recommended!",
                    "author": "Jane Smith",
                    "role": "CEO, TechCorp",
                    "avatar": None,
                }
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            items=FieldRule(
                kind="array",
                min_items=1,
                max_items=4,
                item_schema=_schema(
                    quote=_text(500, required=True),
                    author=_text(100, required=True),
                    role=_text(100),
                    avatar=FieldRule(kind="url"),
                ),
            ),
        ),
    ),
    "pricing": SectionTypeDefinition(
        type="pricing",
        display_name="Pricing",
        description="Pricing tiers and plans",
        default_content={
            "title": "Simple Pricing",
            "subtitle": "Choose the plan that works for you",
            "items": [
                {
                    "name": "Starter",
                    "price": "$9",
                    "period": "/month",
                    "features": ["Feature 1", "Feature 2", "Feature 3"],
                    "ctaText": "Get Started",
                    "ctaLink": "#contact",
                    "highlighted": False,
                },
                {
                    "name": "Pro",
                    "price": "$29",
                    "period": "/month",
                    "features": ["Everything in Starter", "Feature 4", "Feature 5", "Priority Support"],
                    "ctaText": "Get Started",
                    "ctaLink": "#contact",
                    "highlighted": True,
                },
            ],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            items=FieldRule(
                kind="array",
                min_items=1,
                max_items=4,
                item_schema=_schema(
                    name=_text(50, required=True),
                    price=_text(20, required=True),
                    period=_text(20),
                    features=FieldRule(kind="array", max_items=10, item_kind="string"),
                    ctaText=_text(30),
                    ctaLink=_text(200),
                    highlighted=FieldRule(kind="boolean"),
                ),
            ),
        ),
    ),
    "contact": SectionTypeDefinition(
        type="contact",
        display_name="Contact",
        description="Contact form and information",
        default_content={
            "title": "Get in Touch",
            "subtitle": "We'd love to hear from you",
            "email": "hello@example.com",
            "phone": None,
            "address": None,
            "showForm": True,
            "formFields": ["name", "email", "message"],
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            email=FieldRule(kind="email"),
            phone=_text(30),
            address=_text(200),
            showForm=FieldRule(kind="boolean"),
            formFields=FieldRule(kind="array", max_items=10, item_kind="string"),
        ),
    ),
    "contactForm": SectionTypeDefinition(
        type="contactForm",
        display_name="Contact Form",
        description="Configurable contact form with business contact details",
        default_content={
            "title": "Get in Touch",
            "subtitle": "Fill out the form below and we'll respond within 24 hours.",
            "submitButtonText": "Send Message",
            "fields": [
                {"name": "name", "label": "Full Name", "type": "text", "required": True, "placeholder": "Your name"},
                {"name": "email", "label": "Email Address", "type": "email", "required": True, "placeholder": "you@example.com"},
                {"name": "message", "label": "Message", "type": "textarea", "required": True, "placeholder": "How can we help you?"},
            ],
            "contactInfo": {
                "email": "hello@example.com",
                "phone": None,
                "address": None,
                "hours": None,
            },
        },
        content_schema=_schema(
            title=_text(100, required=True),
            subtitle=_text(200),
            submitButtonText=_text(30),
            fields=FieldRule(
                kind="array",
                min_items=1,
                max_items=12,
                item_schema=_schema(
                    name=_text(50, required=True),
                    label=_text(100, required=True),
                    type=FieldRule(
                        kind="enum",
                        allowed_values=("text", "email", "tel", "textarea", "select", "number", "date"),
                        required=True,
                    ),
                    required=FieldRule(kind="boolean"),
                    placeholder=_text(100),
                    options=FieldRule(kind="array", max_items=20, item_kind="string"),
                ),
            ),
            contactInfo=FieldRule(
                kind="object",
                properties=_schema(
                    email=FieldRule(kind="email"),
                    phone=_text(30),
                    address=_text(200),
                    hours=_text(100),
                ),
            ),
        ),
    ),
    "footer": SectionTypeDefinition(
        type="footer",
        display_name="Footer",
        description="Site footer with links and copyright",
        default_content={
            "companyName": "My Company",
            "copyright": "2024 My Company. All rights reserved.",
            "links": [
                {"label": "Privacy", "url": "/privacy"},
                {"label": "Terms", "url": "/terms"},
            ],
            "socialLinks": [],
        },
        content_schema=_schema(
            companyName=_text(100, required=True),
            copyright=_text(200),
            links=FieldRule(
                kind="array",
                max_items=6,
                item_schema=_schema(
                    label=_text(50, required=True),
                    url=_text(200, required=True),
                ),
            ),
            socialLinks=FieldRule(
                kind="array",
                max_items=5,
                item_schema=_schema(
                    platform=FieldRule(kind="enum", allowed_values=SOCIAL_PLATFORMS, required=True),
                    url=_text(200, required=True),
                ),
            ),
        ),
    ),
}

# Starter layout for a brand-new document's home page.
DEFAULT_STARTER_SECTIONS: Sequence[str] = ("hero", "features", "about", "contact", "footer")


class SchemaRegistry:
    """Read-only catalog of section types, icons and theme presets.

    Built once at process start and handed to every component that needs
    type information. Nothing here mutates after construction.
    """

    def __init__(
        self,
        *,
        section_types: Mapping[str, SectionTypeDefinition] = DEFAULT_SECTION_TYPES,
        icons: Iterable[str] = AVAILABLE_ICONS,
        theme_presets: Mapping[str, Mapping[str, str]] = THEME_PRESETS,
        default_preset: str = DEFAULT_THEME_PRESET,
        default_font_family: str = DEFAULT_FONT_FAMILY,
        navigation_styles: Iterable[str] = NAVIGATION_STYLES,
    ) -> None:
        if default_preset not in theme_presets:
            raise ValueError(f"Default theme preset {default_preset!r} is not defined")
        self._section_types = MappingProxyType(dict(section_types))
        self._icons = tuple(icons)
        self._theme_presets = MappingProxyType(
            {key: MappingProxyType(dict(value)) for key, value in theme_presets.items()}
        )
        self._default_preset = default_preset
        self._default_font_family = default_font_family
        self._navigation_styles = tuple(navigation_styles)

    def get_definition(self, section_type: str | None) -> SectionTypeDefinition | None:
        if not isinstance(section_type, str):
            return None
        return self._section_types.get(section_type)

    def require_definition(self, section_type: str | None) -> SectionTypeDefinition:
        definition = self.get_definition(section_type)
        if definition is None:
            raise UnknownSectionTypeError(str(section_type))
        return definition

    def has_type(self, section_type: str | None) -> bool:
        return self.get_definition(section_type) is not None

    def list_types(self) -> list[str]:
        return list(self._section_types)

    def list_icons(self) -> list[str]:
        return list(self._icons)

    def list_theme_presets(self) -> dict[str, dict[str, str]]:
        return {key: dict(value) for key, value in self._theme_presets.items()}

    def list_navigation_styles(self) -> list[str]:
        return list(self._navigation_styles)

    def theme_preset(self, key: str) -> dict[str, str] | None:
        preset = self._theme_presets.get(key)
        return dict(preset) if preset is not None else None

    def default_theme(self) -> dict[str, str]:
        preset = dict(self._theme_presets[self._default_preset])
        preset.pop("name", None)
        preset["fontFamily"] = self._default_font_family
        return preset

    def default_content(self, section_type: str) -> dict[str, Any]:
        return self.require_definition(section_type).new_content()

    def schema_keys(self, section_type: str) -> tuple[str, ...]:
        definition = self.get_definition(section_type)
        return definition.field_names if definition else ()

    def tool_documentation(self) -> str:
        """Plain-text catalog embedded in the agent's system prompt."""
        lines = ["AVAILABLE SECTION TYPES:"]
        for definition in self._section_types.values():
            fields = ", ".join(
                f"{name}*" if rule.required else name
                for name, rule in definition.content_schema.items()
            )
            lines.append(f"- {definition.type}: {definition.description} (fields: {fields})")
        lines.append("")
        lines.append("AVAILABLE THEME PRESETS:")
        for key, preset in self._theme_presets.items():
            lines.append(f"- {key}: {preset.get('name', key)} ({preset.get('primaryColor')})")
        lines.append("")
        lines.append("AVAILABLE ICONS (for features):")
        lines.append(", ".join(self._icons))
        return "\n".join(lines)


DEFAULT_REGISTRY = SchemaRegistry()


__all__ = [
    "AVAILABLE_ICONS",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_REGISTRY",
    "DEFAULT_SECTION_TYPES",
    "DEFAULT_SITE_NAME",
    "DEFAULT_STARTER_SECTIONS",
    "DEFAULT_THEME_PRESET",
    "FIELD_KINDS",
    "HEX_COLOR_PATTERN",
    "FieldRule",
    "NAVIGATION_STYLES",
    "SchemaRegistry",
    "SectionTypeDefinition",
    "THEME_COLOR_FIELDS",
    "THEME_PRESETS",
]
