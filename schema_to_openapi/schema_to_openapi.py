import json
import logging

import click

from .config import TranslatorConfig
from .schema_ast import SchemaDescriptionError, SchemaParser
from .translator import ComponentRegistry, SchemaTranslator, TranslationError

logger = logging.getLogger(__name__)


@click.command()
@click.option("--name", "-n", default=None, type=str, help="File the root schema as a named component")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--components",
    default=None,
    type=click.Path(exists=True, resolve_path=True),
    help="JSON document of already defined components (bucket -> name -> schema)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def schema_to_openapi(name, config, components, verbose, path, output):
    """Translate the schema description at PATH into OpenAPI and write it to OUTPUT."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    with open(path) as f:
        description = json.load(f)

    if config is not None:
        with open(config) as f:
            config = TranslatorConfig.from_dict(json.load(f))
    else:
        config = TranslatorConfig()

    existing = None
    if components is not None:
        with open(components) as f:
            existing = json.load(f)
        # Accept either a bare components mapping or a full document
        if "components" in existing:
            existing = existing["components"]

    try:
        schema = SchemaParser().parse(description)
        result = SchemaTranslator(config).translate(schema, existing)
    except (SchemaDescriptionError, TranslationError) as e:
        raise click.ClickException(str(e)) from e

    if name is None:
        out = result.to_dict()
    else:
        if result.fragment is None:
            raise click.ClickException(f"Schema {name} is forbidden and has no definition")
        registry = ComponentRegistry(result.components)
        registry.define(config.default_class_target, name, result.fragment)
        out = {"components": registry.to_dict()}

    logger.info("Wrote %d component(s) to %s", sum(len(v) for v in out.get("components", {}).values()), output)

    with open(output, "w") as f:
        json.dump(out, f, indent=config.indent, sort_keys=config.sort_keys)
        f.write("\n")
