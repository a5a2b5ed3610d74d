from gitscribe.cli import cli

cli()
