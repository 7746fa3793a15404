# cli.py
import logging
import sys

import click

from pgimportdoc.app import import_document
from pgimportdoc.db.config import settings
from pgimportdoc.errors import ImportDocError
from pgimportdoc.params import DocumentType, ImportParams, PasswordPrompt

log = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["--help", "-?"]}


class _BelowWarning(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def configure_logging(verbose: bool) -> None:
    """Progress lines go to stdout (only with -v), warnings and worse to stderr."""
    logger = logging.getLogger("pgimportdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)

    progress = logging.StreamHandler(sys.stdout)
    progress.addFilter(_BelowWarning())
    progress.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(progress)

    problems = logging.StreamHandler(sys.stderr)
    problems.setLevel(logging.WARNING)
    problems.setFormatter(logging.Formatter(f"{settings.APPLICATION_NAME}: warning: %(message)s"))
    logger.addHandler(problems)


def prompt_policy(no_password: bool, force_password: bool) -> PasswordPrompt:
    if force_password:
        return PasswordPrompt.ALWAYS
    if no_password:
        return PasswordPrompt.NEVER
    return PasswordPrompt.DEFAULT


@click.command(settings.APPLICATION_NAME, context_settings=CONTEXT_SETTINGS)
@click.version_option(settings.VERSION, "-V", "--version",
                      prog_name=settings.APPLICATION_NAME,
                      message="%(prog)s (PostgreSQL) %(version)s")
@click.option("-E", "encoding", metavar="ENCODING", help="import text data in encoding ENCODING")
@click.option("-v", "verbose", is_flag=True, help="write a lot of progress messages")
@click.option("-c", "command", required=True, metavar="COMMAND",
              help="INSERT, UPDATE command with parameter $1")
@click.option("-f", "filename", metavar="NAME", default="-",
              help="file NAME of imported document, default is stdin")
@click.option("-t", "doc_type", type=click.Choice([t.value for t in DocumentType]),
              default=DocumentType.TEXT.value, help="type specification, default is TEXT")
@click.option("-h", "host", metavar="HOSTNAME", help="database server host or socket directory")
@click.option("-p", "port", type=click.IntRange(1, 65535), metavar="PORT",
              help="database server port")
@click.option("-U", "user", metavar="USERNAME", help="user name to connect as")
@click.option("-w", "no_password", is_flag=True, help="never prompt for password")
@click.option("-W", "force_password", is_flag=True, help="force password prompt")
@click.argument("dbname")
def cli(encoding, verbose, command, filename, doc_type, host, port, user,
        no_password, force_password, dbname):
    """Imports XML, TEXT or BYTEA documents to PostgreSQL."""
    configure_logging(verbose)

    params = ImportParams(
        command=command,
        doc_type=DocumentType(doc_type),
        filename=None if filename == "-" else filename,
        encoding=encoding,
        host=host,
        port=port,
        user=user,
        prompt=prompt_policy(no_password, force_password),
        progname=settings.APPLICATION_NAME,
        verbose=verbose,
    )

    if params.encoding is not None and params.doc_type != DocumentType.TEXT:
        log.warning("encoding is used only for type TEXT")

    import_document(dbname, params)
    return 0


def main(argv=None) -> int:
    """Run the command and map every outcome onto an exit status."""
    try:
        rv = cli.main(args=argv, prog_name=settings.APPLICATION_NAME, standalone_mode=False)
    except click.UsageError as e:
        # click's own exit code for usage errors is 2
        e.show()
        return 1
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except ImportDocError as e:
        click.echo(f"{settings.APPLICATION_NAME}: {e}", err=True)
        return e.exit_code
    # --help / --version return their exit code, a finished import returns 0
    return rv or 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
