"""Common CLI options for the CLI."""

import typer

ContinueOpt = typer.Option(
    "",
    "--continue",
    "-c",
    help="Continue token (decimal offset) from a previous page",
    show_default=False,
)

LimitOpt = typer.Option(
    0,
    "--limit",
    "-l",
    help="Maximum number of items per page",
)

FieldSelectorOpt = typer.Option(
    "",
    "--field-selector",
    "-f",
    help="Field selector, e.g. metadata.name=foo,spec.startedAt>2024-01-01T00:00:00Z",
    show_default=False,
)

LabelSelectorOpt = typer.Option(
    "",
    "--label-selector",
    "-L",
    help="Label selector, e.g. app=web,env in (prod,staging)",
    show_default=False,
)

NamespaceOpt = typer.Option(
    "",
    "--namespace",
    "-n",
    envvar="LISTOPTS_NAMESPACE",
    help="Namespace from the request path or query",
    show_default=False,
)

NamePrefixOpt = typer.Option(
    "",
    "--name-prefix",
    help="Only list items whose name starts with this prefix",
    show_default=False,
)

JsonOpt = typer.Option(
    False,
    "--json",
    help="Print the result as JSON instead of a table",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Enable debug logging",
)
