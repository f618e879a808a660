"""KMP Module Generator -- scaffolds new modules inside a multi-module project.

A template is a folder holding a ``template.xml`` parameter schema and a
``root/`` tree of ``.ftl`` files.  Given concrete variable values and a target
directory the generator materialises the tree on disk and registers the new
module(s) in the project's ``settings.gradle(.kts)``.

Quick usage::

    from kmpgen.config import Settings
    from kmpgen.scaffolder import GenerationEngine, TemplateRegistry

    settings = Settings(project_root=Path("/path/to/project"))
    registry = TemplateRegistry(settings)
    registry.reload()

    config = registry.create_configuration(
        registry.get("feature"), {"moduleName": "payments"}, "/path/to/project/modules"
    )
    result = await GenerationEngine(settings).generate(config)
"""

__version__ = "0.3.0"
