import logging

import click

from .cli_utils import import_type, load_config
from .pipeline import MappingError, PipelineGenerator, RootInlining
from .pipeline.analyzer.name_resolver import NAMING_STRATEGIES
from .pipeline.descriptors import load_descriptors_file
from .pipeline.errors import ReflectionError
from .reflection import DataclassReflector
from .utils import RENAME_RULES

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--naming", "-n", default=None, type=click.Choice(list(NAMING_STRATEGIES)))
@click.option(
    "--root-inlining",
    default=None,
    type=click.Choice([policy.value for policy in RootInlining]),
    help="Whether a sole, unreferenced root type is inlined or referenced",
)
@click.option(
    "--additional-properties",
    "-a",
    multiple=True,
    help="TypeId of a struct that accepts unknown properties (repeatable)",
)
@click.option("--rename-all", default=None, type=click.Choice(list(RENAME_RULES)))
@click.option(
    "--descriptors",
    "-d",
    default=None,
    type=click.Path(exists=True, resolve_path=True),
    help="Read descriptors from a JSON file; TYPES are then TypeIds from that file",
)
@click.option("--indent", default=None, type=int, help="Pretty-print with this indentation")
@click.option("--output", "-o", default=None, type=click.Path(resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("types", nargs=-1, required=True)
def jtd_schema(config, naming, root_inlining, additional_properties, rename_all, descriptors, indent, output, verbose, types):
    """Generate a JSON Type Definition schema for TYPES.

    TYPES are Python types given as module:QualName, or TypeIds when
    --descriptors is used.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    config = load_config(config)

    # CLI flags override the config file
    if naming is not None:
        config.naming = naming
    if root_inlining is not None:
        config.root_inlining = RootInlining(root_inlining)
    for type_id in additional_properties:
        config.additional_properties[type_id] = True
    if indent is not None:
        config.indent = indent

    if descriptors is not None:
        lookup = load_descriptors_file(descriptors)
        root_ids = list(types)
        unknown = [type_id for type_id in root_ids if type_id not in lookup]
        if unknown:
            raise click.BadParameter(f"unknown TypeIds: {', '.join(unknown)}", param_hint="TYPES")
    else:
        reflector = DataclassReflector(rename_all=rename_all)
        try:
            root_ids = [reflector.describe(import_type(path)) for path in types]
        except ReflectionError as e:
            raise click.ClickException(str(e)) from e
        lookup = reflector.registry

    logger.debug("Generating schema for %s with %s", ", ".join(root_ids), config.to_dict())
    try:
        out = PipelineGenerator(root_ids, lookup, config).generate()
    except MappingError as e:
        raise click.ClickException(str(e)) from e
    except KeyError as e:
        raise click.ClickException(f"no descriptor for TypeId {e.args[0]!r}") from e

    if output is None:
        click.echo(out)
    else:
        with open(output, "w", encoding="utf-8") as f:
            f.write(out)
