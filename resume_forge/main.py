import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from resume_forge.common.exceptions.resume_exceptions import ResumeForgeError
from resume_forge.common.llm_clients import OpenAIClient
from resume_forge.common.utils import normalize_folder_path, read_file_content, read_json_file, write_json_file
from resume_forge.core.config import Settings
from resume_forge.core.logger import logger
from resume_forge.models.resume import ResumeProfile
from resume_forge.review.changeset import Change
from resume_forge.review.session import SessionRegistry
from resume_forge.storage.resume_store import ResumeStore
from resume_forge.tailoring import IngestService, SkillGapService, TailorService


def parse_arguments(default_model: str, argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        default_model: Default model name to use if not specified
        argv: Argument list, defaults to sys.argv

    Returns:
        Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="resume_forge - tailor a master resume to a job and review every change",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--model",
        default=default_model,
        type=str,
        help=f"OpenAI model to use (default: {default_model})",
    )
    sub = parser.add_subparsers(dest="command", required=True, help="Available commands")

    # Ingest command
    ingest_parser = sub.add_parser("ingest", help="Convert a plain-text resume into a structured JSON profile")
    ingest_parser.add_argument("resume_text", type=Path, help="Path to the resume text or markdown file")
    ingest_parser.add_argument("--output", type=Path, default=None, help="Write the profile JSON here")

    # Tailor command
    tailor_parser = sub.add_parser("tailor", help="Tailor a resume profile to a job description and review it")
    tailor_parser.add_argument("resume_json", type=Path, help="Path to the master resume profile JSON")
    tailor_parser.add_argument("job_description", type=Path, help="Path to the job description text")
    tailor_parser.add_argument("--accept", action="append", default=[], metavar="PATH", help="Accept a change path")
    tailor_parser.add_argument("--reject", action="append", default=[], metavar="PATH", help="Reject a change path")
    outcome = tailor_parser.add_mutually_exclusive_group()
    outcome.add_argument("--undo", action="store_true", help="Discard the proposal and keep the original")
    outcome.add_argument(
        "--preview",
        action="store_true",
        help="Resolve with the given decisions only, leaving pending changes out",
    )
    tailor_parser.add_argument("--output", type=Path, default=None, help="Write the resolved profile JSON here")
    tailor_parser.add_argument("--owner", type=str, default=None, help="Owner id; saves the result to the store")
    tailor_parser.add_argument("--folder", type=str, default=None, help="Folder to file the saved result under")

    # Skill gap command
    gap_parser = sub.add_parser("skill-gap", help="Analyze skill gaps between a resume profile and a job")
    gap_parser.add_argument("resume_json", type=Path, help="Path to the resume profile JSON")
    gap_parser.add_argument("job_description", type=Path, help="Path to the job description text")

    # Store commands
    list_parser = sub.add_parser("list", help="List saved documents in a folder")
    list_parser.add_argument("owner", type=str, help="Owner id")
    list_parser.add_argument("--folder", type=str, default=None, help="Folder to list (default: root)")

    delete_parser = sub.add_parser("delete-folder", help="Delete every saved document in a folder")
    delete_parser.add_argument("owner", type=str, help="Owner id")
    delete_parser.add_argument("folder", type=str, help="Folder to delete")

    return parser.parse_args(argv)


def load_profile(path: Path) -> ResumeProfile:
    return ResumeProfile.model_validate(read_json_file(path))


def emit_json(data: dict, output: Path | None) -> None:
    if output is None:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        write_json_file(output, data)
        logger.success(f"Wrote {output}")


def display_changes(changes: list[Change]) -> None:
    """Print the review surface, one change path per line."""
    print("\nPROPOSED CHANGES:")
    print("-" * 40)
    if not changes:
        print("No changes detected")
    for change in changes:
        print(f"[{change.kind}] {change.path}")
        if change.kind == "modified":
            print(f"    - {change.old_value}")
            print(f"    + {change.new_value}")


def handle_ingest_command(args: argparse.Namespace, settings: Settings, client: OpenAIClient) -> ResumeProfile:
    ingest_service = IngestService(client, settings=settings)
    profile = ingest_service.parse_text(read_file_content(args.resume_text))
    emit_json(profile.to_json_dict(), args.output)
    return profile


def handle_tailor_command(args: argparse.Namespace, settings: Settings, client: OpenAIClient) -> ResumeProfile:
    """Generate a tailored proposal, apply the decisions from the command line, then keep or undo."""
    original = load_profile(args.resume_json)
    job_description = read_file_content(args.job_description)
    tailor_service = TailorService(client, settings=settings)

    session = tailor_service.start_review(SessionRegistry(), original, job_description)
    display_changes(session.changes())

    for path in args.accept:
        session.accept(path)
    for path in args.reject:
        session.reject(path)

    if args.undo:
        resolved = session.undo()
    elif args.preview:
        resolved = session.preview()
    elif args.owner:
        store = ResumeStore(settings.STORE_DIRECTORY)
        resolved = tailor_service.commit(session, store, args.owner, folder_path=args.folder)
    else:
        resolved = session.keep()

    emit_json(resolved.to_json_dict(), args.output)
    return resolved


def handle_skill_gap_command(args: argparse.Namespace, settings: Settings, client: OpenAIClient) -> None:
    service = SkillGapService(client, settings=settings)
    report = service.analyze(load_profile(args.resume_json), read_file_content(args.job_description))
    emit_json(report.model_dump(by_alias=True, mode="json"), None)


def handle_list_command(args: argparse.Namespace, store: ResumeStore) -> list[dict[str, str]]:
    documents = store.list_by_folder(args.owner, args.folder)
    print(f"\nDOCUMENTS IN {normalize_folder_path(args.folder) or '/'}:")
    print("-" * 40)
    if not documents:
        print("No documents found")
    for document in documents:
        print(f"{document['document_id']} (updated {document['updated_at']})")
    return documents


def handle_delete_folder_command(args: argparse.Namespace, store: ResumeStore) -> int:
    removed = store.delete_by_folder(args.owner, args.folder)
    logger.success(f"Deleted {removed} document(s) from {normalize_folder_path(args.folder)}")
    return removed


def main(argv: Sequence[str] | None = None) -> None:
    """Main function for the resume_forge command line."""
    try:
        settings = Settings()  # type: ignore[call-arg]
        logger.debug(f"Current LOG_LEVEL: {settings.LOG_LEVEL}")

        args = parse_arguments(default_model=settings.DEFAULT_MODEL_NAME, argv=argv)
        settings = settings.model_copy(update={"DEFAULT_MODEL_NAME": args.model})

        if args.command == "list":
            handle_list_command(args, ResumeStore(settings.STORE_DIRECTORY))
            return
        if args.command == "delete-folder":
            handle_delete_folder_command(args, ResumeStore(settings.STORE_DIRECTORY))
            return

        client = OpenAIClient(
            api_key=settings.OPENAI_API_KEY,
            temperature=settings.OPENAI_TEMPERATURE,
            timeout_seconds=settings.OPENAI_TIMEOUT_SECONDS,
            max_retries=settings.OPENAI_MAX_RETRIES,
        )

        if args.command == "ingest":
            handle_ingest_command(args, settings, client)
        elif args.command == "tailor":
            handle_tailor_command(args, settings, client)
        elif args.command == "skill-gap":
            handle_skill_gap_command(args, settings, client)
        else:
            print("Error: Invalid command. Use --help for usage information.")
            sys.exit(1)

    except ResumeForgeError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception(f"An error occurred during execution: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
