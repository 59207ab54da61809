from typing import Any, Dict, List

from ..schemas import WebsiteType

WEBSITE_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "landing_v1",
        "name": "Landing Page",
        "websiteType": WebsiteType.landing.value,
        "sections": ["hero", "features", "testimonials", "cta", "contact"],
        "description": "Single conversion-focused page with a strong call to action.",
    },
    {
        "id": "business_v1",
        "name": "Business",
        "websiteType": WebsiteType.business.value,
        "sections": ["hero", "services", "about", "testimonials", "contact"],
        "description": "Company site presenting services, team and contact details.",
    },
    {
        "id": "portfolio_v1",
        "name": "Portfolio",
        "websiteType": WebsiteType.portfolio.value,
        "sections": ["hero", "projects", "skills", "about", "contact"],
        "description": "Showcase of projects and skills for creatives and freelancers.",
    },
    {
        "id": "ecommerce_v1",
        "name": "Online Store",
        "websiteType": WebsiteType.ecommerce.value,
        "sections": ["hero", "featured-products", "categories", "reviews", "newsletter"],
        "description": "Storefront highlighting products, categories and reviews.",
    },
    {
        "id": "restaurant_v1",
        "name": "Restaurant & Cafe",
        "websiteType": WebsiteType.restaurant.value,
        "sections": ["hero", "menu", "story", "gallery", "reservations"],
        "description": "Menu, story and reservation details for food businesses.",
    },
    {
        "id": "blog_v1",
        "name": "Blog",
        "websiteType": WebsiteType.blog.value,
        "sections": ["hero", "featured-posts", "categories", "newsletter"],
        "description": "Article listing with featured posts and newsletter signup.",
    },
]


def list_templates() -> List[Dict[str, Any]]:
    return [dict(item, sections=list(item["sections"])) for item in WEBSITE_TEMPLATES]
