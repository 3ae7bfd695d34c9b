# flyover_cms/application/resources/registry.py
"""
Per-resource configuration.

Every admin resource is one ResourceDefinition; the generic service and the
admin/public blueprints are driven entirely by this table.
"""
from typing import Dict, Iterable, List, Tuple

from pymongo import ASCENDING, DESCENDING

from flyover_cms.application.events.hooks import EventHooks
from flyover_cms.application.registrations.hooks import RegistrationHooks
from flyover_cms.application.uploads.hooks import UploadHooks
from flyover_cms.application.users.hooks import UserHooks
from flyover_cms.domain.derived import (
    DefaultFromRule,
    EventScheduleRule,
    OrderDefaultRule,
    PublishedAtRule,
    ReadTimeRule,
    SequenceRule,
    SlugRule,
)
from flyover_cms.domain.exceptions import NotFound
from flyover_cms.domain.lifecycle import (
    CONTENT_LIFECYCLE,
    EVENT_LIFECYCLE,
    REGISTRATION_LIFECYCLE,
)
from flyover_cms.persistence.gateway import MongoGateway
from flyover_cms.schemas.content import BlogSchema
from flyover_cms.schemas.events import (
    EventSchema,
    RegistrationAdminSchema,
    RegistrationSchema,
)
from flyover_cms.schemas.home import (
    AwardSchema,
    FeatureSchema,
    PartnerSchema,
    SlideSchema,
    StepSchema,
)
from flyover_cms.schemas.office import OfficeSchema
from flyover_cms.schemas.pages import (
    DestinationSchema,
    ServiceSchema,
    TeamMemberSchema,
    TestimonialSchema,
)
from flyover_cms.schemas.upload import UploadSchema
from flyover_cms.schemas.user import UserSchema

from .definition import BY_ORDER, ResourceDefinition
from .service import ResourceService

PUBLISHED = {"status": "published"}


def ordered_home_item(name, singular, plural, label, collection, schema) -> ResourceDefinition:
    """Home-page blocks: legacy numeric id, admin-controlled display order."""
    return ResourceDefinition(
        name=name,
        singular=singular,
        plural=plural,
        label=label,
        collection=collection,
        schema=schema,
        rules=(SequenceRule(), OrderDefaultRule()),
        search_fields=("title",),
        sort=BY_ORDER,
        public_filter={},
    )


def build_definitions() -> List[ResourceDefinition]:
    return [
        ResourceDefinition(
            name="blogs",
            singular="blog",
            plural="blogs",
            label="Blog",
            collection="blogs",
            schema=BlogSchema,
            rules=(SlugRule(), ReadTimeRule(), PublishedAtRule()),
            search_fields=("title", "excerpt", "author"),
            filter_fields=("status", "category", "featured"),
            lifecycle=CONTENT_LIFECYCLE,
            public_filter=PUBLISHED,
            public_lookup="slug",
            unique_indexes=(("slug",),),
        ),
        ResourceDefinition(
            name="partners",
            singular="partner",
            plural="partners",
            label="Partner",
            collection="partners",
            schema=PartnerSchema,
            rules=(SequenceRule(), OrderDefaultRule()),
            search_fields=("name", "country", "category"),
            filter_fields=("category", "country"),
            sort=BY_ORDER,
            public_filter={},
        ),
        ResourceDefinition(
            name="awards",
            singular="award",
            plural="awards",
            label="Award",
            collection="awards",
            schema=AwardSchema,
            rules=(SequenceRule(), OrderDefaultRule()),
            search_fields=("title",),
            sort=BY_ORDER,
            public_filter={},
        ),
        ordered_home_item(
            "study-abroad-steps",
            "step",
            "steps",
            "Study abroad step",
            "studyAbroadSteps",
            StepSchema,
        ),
        ordered_home_item(
            "why-choose-us-features",
            "feature",
            "features",
            "Feature",
            "whychooseusfeatures",
            FeatureSchema,
        ),
        ResourceDefinition(
            name="offices",
            singular="office",
            plural="offices",
            label="Office",
            collection="offices",
            schema=OfficeSchema,
            search_fields=("city", "phone", "email"),
            public_filter={},
        ),
        ResourceDefinition(
            name="destinations",
            singular="destination",
            plural="destinations",
            label="Destination",
            collection="destinations",
            schema=DestinationSchema,
            rules=(
                SequenceRule(),
                DefaultFromRule(source="country", target="name"),
                SlugRule(source="country"),
            ),
            search_fields=("country", "name"),
            sort=(("country", ASCENDING),),
            public_filter={},
            public_lookup="slug",
            unique_indexes=(("slug",),),
        ),
        ResourceDefinition(
            name="services",
            singular="service",
            plural="services",
            label="Service",
            collection="services",
            schema=ServiceSchema,
            rules=(SlugRule(source="name"),),
            search_fields=("name", "title", "description"),
            filter_fields=("popular",),
            public_filter={},
            public_lookup="slug",
            unique_indexes=(("slug",),),
        ),
        ResourceDefinition(
            name="team",
            singular="team",
            plural="team",
            label="Team member",
            collection="teams",
            schema=TeamMemberSchema,
            rules=(OrderDefaultRule(),),
            search_fields=("name", "role", "email"),
            filter_fields=("isActive",),
            sort=BY_ORDER,
            public_filter={"isActive": True},
        ),
        ResourceDefinition(
            name="testimonials",
            singular="testimonial",
            plural="testimonials",
            label="Testimonial",
            collection="testimonials",
            schema=TestimonialSchema,
            search_fields=("author", "quote", "source"),
            public_filter={},
        ),
        ResourceDefinition(
            name="slides",
            singular="slide",
            plural="slides",
            label="Slide",
            collection="slides",
            schema=SlideSchema,
            rules=(OrderDefaultRule(),),
            search_fields=("headline", "sub"),
            filter_fields=("active",),
            sort=BY_ORDER,
            public_filter={"active": True},
        ),
        ResourceDefinition(
            name="events",
            singular="event",
            plural="events",
            label="Event",
            collection="events",
            schema=EventSchema,
            rules=(SlugRule(), EventScheduleRule()),
            search_fields=("title", "location", "city"),
            filter_fields=("status", "city"),
            lifecycle=EVENT_LIFECYCLE,
            hooks=EventHooks(),
            public_filter=PUBLISHED,
            public_lookup="slug",
            unique_indexes=(("slug",),),
        ),
        ResourceDefinition(
            name="event-registrations",
            singular="registration",
            plural="registrations",
            label="Registration",
            collection="event_registrations",
            schema=RegistrationSchema,
            update_schema=RegistrationAdminSchema,
            search_fields=("fullName", "email", "phone", "eventTitle"),
            filter_fields=("status", "paymentStatus", "eventId"),
            sort=(("registrationDate", DESCENDING),),
            lifecycle=REGISTRATION_LIFECYCLE,
            hooks=RegistrationHooks(),
            unique_indexes=(("eventId", "email"),),
        ),
        ResourceDefinition(
            name="users",
            singular="user",
            plural="users",
            label="User",
            collection="users",
            schema=UserSchema,
            search_fields=("name", "email", "phone"),
            filter_fields=("role", "isActive"),
            hooks=UserHooks(),
            write_roles=("ADMIN",),
            unique_indexes=(("email",),),
        ),
        ResourceDefinition(
            name="uploads",
            singular="upload",
            plural="uploads",
            label="Upload",
            collection="uploads",
            schema=UploadSchema,
            search_fields=("originalName", "filename", "mimeType"),
            filter_fields=("mimeType", "uploadedBy"),
            hooks=UploadHooks(),
            operations=frozenset({"list", "get", "delete"}),
        ),
    ]


def response_keys(name: str) -> Tuple[str, str]:
    """(singular, plural) envelope keys the API uses for ``name``."""
    for definition in build_definitions():
        if definition.name == name:
            return definition.singular, definition.plural
    raise KeyError(f"Unknown resource: {name}")


class ResourceRegistry:
    """One ResourceService per definition, sharing the injected gateway."""

    def __init__(self, gateway: MongoGateway, config, definitions: Iterable[ResourceDefinition] = None):
        if definitions is None:
            definitions = build_definitions()

        default_limit = config.get("DEFAULT_PAGE_SIZE", 20)
        max_limit = config.get("MAX_PAGE_SIZE", 100)

        self._services: Dict[str, ResourceService] = {
            definition.name: ResourceService(
                definition,
                gateway,
                default_limit=default_limit,
                max_limit=max_limit,
            )
            for definition in definitions
        }

    @property
    def definitions(self) -> List[ResourceDefinition]:
        return [service.definition for service in self._services.values()]

    def get(self, name: str) -> ResourceService:
        service = self._services.get(name)
        if service is None:
            raise NotFound(f"Unknown resource: {name}")
        return service

    def ensure_indexes(self) -> List[str]:
        for service in self._services.values():
            service.ensure_indexes()
        return list(self._services)
