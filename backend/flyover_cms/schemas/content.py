from typing import List, Literal, Optional

from .base import HttpUrlStr, RequiredStr, Schema, optional_str, required_str

BLOG_CATEGORIES = (
    "Study Guides",
    "Scholarships",
    "Visa Guides",
    "Success Stories",
    "University Tips",
    "Financial Planning",
    "Study Abroad",
    "Cultural Adaptation",
)

BlogCategory = Literal[
    "Study Guides",
    "Scholarships",
    "Visa Guides",
    "Success Stories",
    "University Tips",
    "Financial Planning",
    "Study Abroad",
    "Cultural Adaptation",
]

ContentStatus = Literal["draft", "published", "archived"]


class BlogSchema(Schema):
    title: required_str(300)
    excerpt: optional_str(1000) = ""
    content: RequiredStr
    author: required_str(100)
    category: BlogCategory
    tags: List[RequiredStr] = []
    image: Optional[HttpUrlStr] = None
    featured_image: Optional[HttpUrlStr] = None
    featured: bool = False
    status: ContentStatus = "draft"
