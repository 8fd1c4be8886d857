from pageprops.modules.registry import ModuleDescriptor

# Dynamic post pages carry the post itself as the page's content item, so
# there is nothing extra to fetch.
DESCRIPTOR = ModuleDescriptor(name="PostDetails")
