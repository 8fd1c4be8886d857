"""Rich-text module: serves the author's HTML with unsafe markup removed."""

from typing import Optional

from pageprops.modules.registry import ModuleContext, ModuleDescriptor
from pageprops.services.sanitizer import sanitize_rich_text


async def get_custom_props(context: ModuleContext) -> Optional[dict]:
    fields = context.item.get("fields") or {}
    textblob = fields.get("textblob")
    if not textblob:
        return None
    return {"html": sanitize_rich_text(textblob)}


DESCRIPTOR = ModuleDescriptor(name="RichTextArea", get_custom_props=get_custom_props)
