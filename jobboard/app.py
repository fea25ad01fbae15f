import argparse
import json
from pathlib import Path

from . import __version__
from . import env
from .errors import JobBoardError
from .logger import get_logger
from .schema import OPTIONAL_JOB_FIELDS
from .store import JobStore


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _job_fields(args: argparse.Namespace, names) -> dict:
    """Collect the job fields that were given on the command line."""
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def cmd_publish(store: JobStore, args: argparse.Namespace) -> None:
    payload = _job_fields(args, ["position", "email"] + OPTIONAL_JOB_FIELDS)
    _print_json(store.publish_job(payload, caller=args.caller))


def cmd_list(store: JobStore, args: argparse.Namespace) -> None:
    if args.mine:
        jobs = store.get_my_publish_jobs(args.caller)
    elif args.applied:
        jobs = store.get_my_apply_jobs(args.caller)
    else:
        jobs = store.get_total_jobs()
    _print_json(jobs)


def cmd_search(store: JobStore, args: argparse.Namespace) -> None:
    _print_json(store.search_jobs(args.keyword))


def cmd_show(store: JobStore, args: argparse.Namespace) -> None:
    _print_json(store.get_job(args.id))


def cmd_apply(store: JobStore, args: argparse.Namespace) -> None:
    payload = {"name": args.name, "email": args.email}
    _print_json(store.apply_job(args.id, payload, caller=args.caller))


def cmd_cancel(store: JobStore, args: argparse.Namespace) -> None:
    _print_json(store.cancel_applied_job(args.id, caller=args.caller))


def cmd_update(store: JobStore, args: argparse.Namespace) -> None:
    payload = _job_fields(args, ["position", "email"] + OPTIONAL_JOB_FIELDS)
    if not payload:
        raise SystemExit("Nothing to update. Pass at least one field option.")
    _print_json(store.update_job(args.id, payload, caller=args.caller))


def cmd_delete(store: JobStore, args: argparse.Namespace) -> None:
    _print_json(store.delete_job(args.id, caller=args.caller))


def _add_job_field_options(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--position", required=required, help="Position title")
    parser.add_argument("--email", required=required, help="Contact email for the posting")
    parser.add_argument("--skill", help="Required skills")
    parser.add_argument("--company-name", dest="company_name", help="Company name")
    parser.add_argument("--company-url", dest="company_url", help="Company website URL")
    parser.add_argument("--description", help="Job description")
    parser.add_argument("--salary", help="Salary range")
    parser.add_argument("--location", help="Job location")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board record store")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", help="Path to SQLite database (default: $JOBBOARD_DB or data/jobs.db)")
    parser.add_argument("--caller", help="Caller identity (default: $JOBBOARD_CALLER or OS user)")

    subparsers = parser.add_subparsers(dest="command")

    pub = subparsers.add_parser("publish", help="Publish a new job")
    _add_job_field_options(pub, required=True)
    pub.set_defaults(func=cmd_publish)

    lst = subparsers.add_parser("list", help="List jobs")
    which = lst.add_mutually_exclusive_group()
    which.add_argument("--mine", action="store_true", help="Only jobs published by the caller")
    which.add_argument("--applied", action="store_true", help="Only jobs the caller applied to")
    lst.set_defaults(func=cmd_list)

    sea = subparsers.add_parser("search", help="Search jobs by keyword (case-insensitive)")
    sea.add_argument("keyword", help="Keyword matched against position, skill, company, location, description")
    sea.set_defaults(func=cmd_search)

    shw = subparsers.add_parser("show", help="Show a single job")
    shw.add_argument("--id", required=True, help="Job id")
    shw.set_defaults(func=cmd_show)

    app = subparsers.add_parser("apply", help="Apply to a job")
    app.add_argument("--id", required=True, help="Job id")
    app.add_argument("--name", required=True, help="Applicant name")
    app.add_argument("--email", required=True, help="Applicant email")
    app.set_defaults(func=cmd_apply)

    can = subparsers.add_parser("cancel", help="Withdraw an application")
    can.add_argument("--id", required=True, help="Job id")
    can.set_defaults(func=cmd_cancel)

    upd = subparsers.add_parser("update", help="Update fields of a job you published")
    upd.add_argument("--id", required=True, help="Job id")
    _add_job_field_options(upd, required=False)
    upd.set_defaults(func=cmd_update)

    dele = subparsers.add_parser("delete", help="Delete a job you published")
    dele.add_argument("--id", required=True, help="Job id")
    dele.set_defaults(func=cmd_delete)

    return parser


def main(argv=None):
    # Load .env if present (JOBBOARD_DB, JOBBOARD_CALLER, etc.)
    env.load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    args.caller = args.caller or env.caller_identity()
    db_path = Path(args.db) if args.db else env.db_path()
    logger = get_logger(level=env.log_level(), log_dir=env.log_dir())

    store = JobStore.open(db_path, logger=logger)
    try:
        args.func(store, args)
    except JobBoardError as e:
        raise SystemExit(str(e))
    finally:
        store.close()


if __name__ == "__main__":
    main()
