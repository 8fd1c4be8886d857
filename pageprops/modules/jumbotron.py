from pageprops.modules.registry import ModuleDescriptor

# Renders straight from its title/subtitle/background fields.
DESCRIPTOR = ModuleDescriptor(name="Jumbotron")
