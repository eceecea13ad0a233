"""Assembly of entity bundles into TypeScript module text."""

from zodgen.codegen.generator import Entity, ModelMappings
from zodgen.codegen.grouping import INDEX_MODULE
from zodgen.codegen.model_generator import GeneratedModel
from zodgen.codegen.rendering import render

FILE_EXTENSION = '.ts'


def render_model(model: GeneratedModel) -> str:
    """Render one model as a ``//#region`` block."""
    return render('model.ts.j2', model=model)


def render_entity(entity: Entity) -> str:
    return render(
        'entity.ts.j2',
        import_lines=entity.imports.to_lines(),
        regions=[render_model(model) for model in entity.models],
    )


def render_index(module_names: list[str]) -> str:
    return render('index.ts.j2', modules=sorted(module_names))


def render_modules(mappings: ModelMappings, write_index: bool = True) -> dict[str, str]:
    """Render every non-empty entity, keyed by file name.

    Returns:
        File name (e.g. ``Users.ts``) to file content, in entity order, with
        ``index.ts`` last when requested.
    """
    files: dict[str, str] = {}
    for entity in mappings.entities.values():
        if not entity.models:
            continue
        files[f'{entity.module_name}{FILE_EXTENSION}'] = render_entity(entity)
    if write_index and files:
        stems = [name[: -len(FILE_EXTENSION)] for name in files]
        files[f'{INDEX_MODULE}{FILE_EXTENSION}'] = render_index(stems)
    return files
