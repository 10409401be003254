"""packagedetails - command line front end.

    Returns:
        int: Exit code
"""
import logging
import sys

from packagedetails.args import parse_args
from packagedetails.common.logging_utils import Timer, configure_logging, extra_context, is_debug_enabled
from packagedetails.config import load_config
from packagedetails.constants import Constants, ExitCodes
from packagedetails.errors import DuplicateKeyError, FetchError, MissingRequiredFieldError
from packagedetails.header import to_external_name
from packagedetails.index import PackageIndex
from packagedetails.reconcile import Reconciler, reduce_to_newest
from packagedetails.storage import list_archives, load_index, write_index

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _load(location, allow_packages_only_once=True):
    with Timer() as t:
        index = load_index(location, allow_packages_only_once=allow_packages_only_once)
    logger.info("Loaded %s: %d records in %d ms", location, index.count(), t.duration_ms())
    return index


def cmd_show(args) -> int:
    """Print the header fields and counts of an index."""
    index = _load(args.INDEX)
    for name, value in index.header.fields().items():
        print(f"{to_external_name(name)}: {value}")
    print(f"Line-Count: {index.get_header(Constants.LINE_COUNT_FIELD)}")
    print(f"Records: {index.line_count}")
    print(f"Warnings: {len(index.warnings)}")
    return ExitCodes.SUCCESS.value


def cmd_check(args) -> int:
    """Validate an index and report every problem found."""
    index = _load(args.INDEX)
    corpus = getattr(args, "CORPUS", None)
    archives = None
    if corpus:
        archives = list_archives(corpus)
        logger.info("Corpus %s has %d archives", corpus, len(archives))

    errors = Reconciler(corpus or "").validate(index, archives)
    if not errors:
        print(f"{args.INDEX}: OK ({index.line_count} records)")
        return ExitCodes.SUCCESS.value

    for error in errors:
        print(f"{args.INDEX}: {type(error).__name__}: {error}")
    logger.error("Index failed %d check(s)", len(errors))
    return ExitCodes.VALIDATION_FAILED.value


def cmd_reduce(args) -> int:
    """Print the newest archive of every distribution in a corpus."""
    for path in reduce_to_newest(list_archives(args.CORPUS)):
        print(path)
    return ExitCodes.SUCCESS.value


def cmd_build(args) -> int:
    """Write a new index from entries given on the command line."""
    config = load_config(getattr(args, "CONFIG", None))
    if args.MULTIPLE_VERSIONS:
        config.allow_packages_only_once = False
    index = PackageIndex.new(config)
    for name, version, path in args.ENTRIES:
        index.add({Constants.PRIMARY_KEY_COLUMN: name, "version": version, "path": path})
    logger.info("Added entries. Entry count is %d", index.count())
    write_index(index, args.OUTPUT)
    print(f"Wrote {index.line_count} records to {args.OUTPUT}")
    return ExitCodes.SUCCESS.value


_COMMANDS = {
    "show": cmd_show,
    "check": cmd_check,
    "reduce": cmd_reduce,
    "build": cmd_build,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        code = _COMMANDS[args.action](args)
    except FetchError as e:
        logger.error("%s", e)
        code = ExitCodes.CONNECTION_ERROR.value
    except (DuplicateKeyError, MissingRequiredFieldError) as e:
        logger.error("Could not build index: %s", e)
        code = ExitCodes.FILE_ERROR.value
    except OSError as e:
        logger.error("File error: %s, aborting", e)
        code = ExitCodes.FILE_ERROR.value

    sys.exit(code)


if __name__ == "__main__":
    main()
