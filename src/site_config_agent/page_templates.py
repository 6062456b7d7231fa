from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Sequence

from .document import generate_page_id, new_section, renumber
from .errors import UnknownPageTemplateError
from .schema_registry import DEFAULT_REGISTRY, SchemaRegistry


@dataclass(frozen=True)
class SectionBlueprint:
    type: str
    # String values may use {site_name} and {year}.
    content: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PageTemplate:
    id: str
    name: str
    slug: str
    description: str
    icon: str
    sections: Sequence[SectionBlueprint]


_FOOTER = SectionBlueprint(
    type="footer",
    content={
        "companyName": "{site_name}",
        "copyright": "© {year} {site_name}. All rights reserved.",
    },
)


DEFAULT_PAGE_TEMPLATES: Mapping[str, PageTemplate] = {
    "home": PageTemplate(
        id="home",
        name="Home",
        slug="",
        description="Main landing page with hero, features, and call to action",
        icon="house",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "Welcome to {site_name}",
                    "subheadline": "Professional services you can trust",
                    "ctaText": "Get Started",
                    "ctaLink": "#contact",
                },
            ),
            SectionBlueprint(
                type="features",
                content={"title": "Why Choose Us", "subtitle": "What sets us apart from the competition"},
            ),
            SectionBlueprint(type="testimonials", content={"title": "What Our Clients Say"}),
            SectionBlueprint(
                type="contact",
                content={
                    "title": "Ready to Get Started?",
                    "subtitle": "Contact us today for a free consultation",
                },
            ),
            _FOOTER,
        ),
    ),
    "about": PageTemplate(
        id="about",
        name="About Us",
        slug="about",
        description="Tell your company story and introduce your team",
        icon="people",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "About {site_name}",
                    "subheadline": "Learn more about our story and mission",
                    "ctaText": "Meet the Team",
                    "ctaLink": "#team",
                    "backgroundColorStart": "#1a365d",
                    "backgroundColorEnd": "#2d3748",
                },
            ),
            SectionBlueprint(
                type="story",
                content={
                    "title": "Our Story",
                    "content": (
                        "<p>{site_name} was founded with a simple mission: to provide exceptional "
                        "service to our community.</p><p>Over the years, we've built a reputation "
                        "for quality, reliability, and customer satisfaction.</p>"
                    ),
                    "image": "https://placehold.co/600x400/f3f4f6/6b7280?text=Our+Story",
                    "imagePosition": "right",
                    "highlights": [
                        {"label": "Years Experience", "value": "10+"},
                        {"label": "Happy Clients", "value": "500+"},
                        {"label": "Projects Done", "value": "1000+"},
                    ],
                },
            ),
            SectionBlueprint(
                type="team",
                content={
                    "title": "Meet Our Team",
                    "subtitle": "The dedicated professionals behind our success",
                },
            ),
            _FOOTER,
        ),
    ),
    "services": PageTemplate(
        id="services",
        name="Services",
        slug="services",
        description="Showcase your services and offerings",
        icon="wrench",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "Our Services",
                    "subheadline": "Professional solutions tailored to your needs",
                    "ctaText": "Get a Quote",
                    "ctaLink": "#contact",
                    "backgroundColorStart": "#065f46",
                    "backgroundColorEnd": "#047857",
                },
            ),
            SectionBlueprint(
                type="services",
                content={
                    "title": "What We Offer",
                    "subtitle": "Comprehensive services to meet all your needs",
                    "items": [
                        {
                            "icon": "wrench",
                            "title": "Service 1",
                            "description": "Detailed description of your first service offering and its benefits to customers.",
                            "price": None,
                            "ctaText": "Learn More",
                            "ctaLink": "#contact",
                        },
                        {
                            "icon": "gear",
                            "title": "Service 2",
                            "description": "Detailed description of your second service offering and its benefits to customers.",
                            "price": None,
                            "ctaText": "Learn More",
                            "ctaLink": "#contact",
                        },
                        {
                            "icon": "headset",
                            "title": "Service 3",
                            "description": "Detailed description of your third service offering and its benefits to customers.",
                            "price": None,
                            "ctaText": "Learn More",
                            "ctaLink": "#contact",
                        },
                    ],
                },
            ),
            SectionBlueprint(
                type="pricing",
                content={"title": "Pricing Plans", "subtitle": "Transparent pricing with no hidden fees"},
            ),
            SectionBlueprint(
                type="contact",
                content={"title": "Request a Quote", "subtitle": "Get in touch for a personalized quote"},
            ),
            _FOOTER,
        ),
    ),
    "contact": PageTemplate(
        id="contact",
        name="Contact",
        slug="contact",
        description="Contact form and business information",
        icon="envelope",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "Contact Us",
                    "subheadline": "We'd love to hear from you",
                    "ctaText": "Send Message",
                    "ctaLink": "#contact-form",
                    "backgroundColorStart": "#7c3aed",
                    "backgroundColorEnd": "#6d28d9",
                },
            ),
            SectionBlueprint(
                type="contactForm",
                content={
                    "title": "Get in Touch",
                    "subtitle": "Fill out the form below and we'll respond within 24 hours.",
                    "submitButtonText": "Send Message",
                    "fields": [
                        {"name": "name", "label": "Full Name", "type": "text", "required": True, "placeholder": "Your name"},
                        {"name": "email", "label": "Email Address", "type": "email", "required": True, "placeholder": "you@example.com"},
                        {"name": "phone", "label": "Phone Number", "type": "tel", "required": False, "placeholder": "(555) 123-4567"},
                        {
                            "name": "service",
                            "label": "Service Interested In",
                            "type": "select",
                            "required": False,
                            "options": ["General Inquiry", "Service 1", "Service 2", "Service 3"],
                        },
                        {"name": "message", "label": "Message", "type": "textarea", "required": True, "placeholder": "How can we help you?"},
                    ],
                    "contactInfo": {
                        "email": "hello@example.com",
                        "phone": "(555) 123-4567",
                        "address": "123 Main Street, City, State 12345",
                        "hours": "Mon-Fri: 9am-5pm",
                    },
                },
            ),
            _FOOTER,
        ),
    ),
    "team": PageTemplate(
        id="team",
        name="Our Team",
        slug="team",
        description="Introduce your team members",
        icon="users",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "Our Team",
                    "subheadline": "Meet the people who make it all happen",
                    "ctaText": "Join Us",
                    "ctaLink": "#careers",
                    "backgroundColorStart": "#be185d",
                    "backgroundColorEnd": "#9d174d",
                },
            ),
            SectionBlueprint(
                type="team",
                content={
                    "title": "Leadership",
                    "subtitle": "Our experienced leadership team",
                    "members": [
                        {
                            "name": "John Smith",
                            "role": "CEO & Founder",
                            "bio": "John founded the company with a vision to transform the industry.",
                            "photo": "https://placehold.co/200x200/3B82F6/white?text=JS",
                            "email": None,
                            "linkedin": None,
                        },
                        {
                            "name": "Jane Doe",
                            "role": "COO",
                            "bio": "Jane oversees daily operations and ensures excellence in everything we do.",
                            "photo": "https://placehold.co/200x200/10B981/white?text=JD",
                            "email": None,
                            "linkedin": None,
                        },
                    ],
                },
            ),
            SectionBlueprint(
                type="contact",
                content={
                    "title": "Interested in Joining Our Team?",
                    "subtitle": "We're always looking for talented individuals",
                },
            ),
            _FOOTER,
        ),
    ),
    "gallery": PageTemplate(
        id="gallery",
        name="Gallery",
        slug="gallery",
        description="Showcase your work with images",
        icon="image",
        sections=(
            SectionBlueprint(
                type="hero",
                content={
                    "headline": "Our Work",
                    "subheadline": "See examples of our projects and results",
                    "ctaText": "Get Started",
                    "ctaLink": "/contact",
                    "backgroundColorStart": "#0891b2",
                    "backgroundColorEnd": "#0e7490",
                },
            ),
            SectionBlueprint(
                type="gallery",
                content={"title": "Project Gallery", "subtitle": "Browse through our completed projects", "columns": 3},
            ),
            SectionBlueprint(
                type="contact",
                content={"title": "Like What You See?", "subtitle": "Let's discuss your project"},
            ),
            _FOOTER,
        ),
    ),
}


def _render(value: Any, variables: Mapping[str, Any]) -> Any:
    if isinstance(value, str):
        return value.format(**variables)
    if isinstance(value, dict):
        return {key: _render(item, variables) for key, item in value.items()}
    if isinstance(value, list):
        return [_render(item, variables) for item in value]
    return value


class PageTemplateCatalog:
    def __init__(
        self,
        *,
        templates: Mapping[str, PageTemplate] = DEFAULT_PAGE_TEMPLATES,
        registry: SchemaRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self._templates = dict(templates)
        self._registry = registry

    def get(self, template_id: str) -> PageTemplate:
        template = self._templates.get(template_id)
        if template is None:
            raise UnknownPageTemplateError(template_id)
        return template

    def list_templates(self) -> list[dict[str, str]]:
        return [
            {
                "id": template.id,
                "name": template.name,
                "slug": template.slug,
                "description": template.description,
                "icon": template.icon,
            }
            for template in self._templates.values()
        ]

    def template_ids(self) -> list[str]:
        return list(self._templates)

    def instantiate(
        self,
        template_id: str,
        site_name: str,
        *,
        name: str | None = None,
        slug: str | None = None,
    ) -> dict[str, Any]:
        """Build a new, non-home page from a template; slug uniqueness is the caller's job."""
        template = self.get(template_id)
        variables = {"site_name": site_name, "year": date.today().year}
        sections = [
            new_section(self._registry, blueprint.type, _render(dict(blueprint.content), variables))
            for blueprint in template.sections
        ]
        renumber(sections)
        return {
            "id": generate_page_id(),
            "name": name or template.name,
            "slug": slug if slug is not None else template.slug,
            "isHome": False,
            "sections": sections,
        }


DEFAULT_PAGE_TEMPLATE_CATALOG = PageTemplateCatalog()


__all__ = [
    "DEFAULT_PAGE_TEMPLATES",
    "DEFAULT_PAGE_TEMPLATE_CATALOG",
    "PageTemplate",
    "PageTemplateCatalog",
    "SectionBlueprint",
]
