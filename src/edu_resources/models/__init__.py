from edu_resources.models.content import ContentItem, ContentTermLink, Term
from edu_resources.models.events import ResourceEvent
from edu_resources.models.option import PluginOption
from edu_resources.models.resource import ResourceMeta
from edu_resources.models.user import User

__all__ = [
    "User",
    "ContentItem",
    "Term",
    "ContentTermLink",
    "ResourceMeta",
    "ResourceEvent",
    "PluginOption",
]
