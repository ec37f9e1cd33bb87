#!/usr/bin/env python3
"""
CLI for checking and exporting chatbot flow documents
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# 프로젝트 경로 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from core.config import EditorSettings, setup_logging
from core.session import EditorSession
from flowgraph.schema import ParseError
from loaders.flow_loader import FlowLoader

load_dotenv()

logger = logging.getLogger(__name__)


def print_report(session: EditorSession) -> None:
    report = session.analyze()
    print("\n 흐름 분석:")
    print(f"   Start nodes: {report.start_nodes}")
    print(f"   End nodes: {report.end_nodes}")
    print(f"   DAG: {report.is_dag}")
    for e in report.errors:
        print(f"   ❌ {e}")
    for w in report.warnings:
        print(f"   ⚠️ {w}")


def load_session(file_path: str, settings: EditorSettings) -> EditorSession:
    session = EditorSession(settings)
    result = FlowLoader().load_from_file(file_path)
    if isinstance(result, ParseError):
        raise ValueError(str(result))
    session.import_document(result)
    return session


def validate_only(session: EditorSession, strict: bool = False) -> bool:
    """Run the flow validator and print its verdict"""
    result = session.validate()
    if not result.ok:
        print(f"❌ {result.message}")
        return False

    if strict:
        report = session.analyze()
        if report.unreachable_nodes:
            print(f"❌ Unreachable from start: {sorted(report.unreachable_nodes)}")
            return False

    print(f"✅ {result.message}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Chatbot flow document tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a flow
  python cli/flow_cli.py --file flows/support.json --validate-only

  # Also require every node to be reachable from a start node
  python cli/flow_cli.py --file flows/support.json --validate-only --strict

  # Write a fresh flow with only the start node
  python cli/flow_cli.py --new flows/empty.json
        """
    )

    parser.add_argument('--file', help='Path to a flow .json document')
    parser.add_argument('--validate-only', action='store_true', help='Validate the flow and exit')
    parser.add_argument('--strict', action='store_true', help='Fail validation on nodes unreachable from start')
    parser.add_argument('--analyze', action='store_true', help='Print the directed-path analysis')
    parser.add_argument('--export', metavar='PATH', help='Re-export the loaded flow with fresh metadata')
    parser.add_argument('--new', metavar='PATH', help='Write a new flow containing only the start node')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')

    args = parser.parse_args()

    settings = EditorSettings.from_env()
    setup_logging(settings.log_level, args.verbose)

    if args.new:
        session = EditorSession(settings)
        FlowLoader().save_to_file(session.export_document(), args.new)
        print(f"✅ New flow written: {args.new}")
        sys.exit(0)

    if not args.file:
        parser.error("--file is required unless --new is given")

    try:
        session = load_session(args.file, settings)
    except FileNotFoundError as e:
        print(f"파일을 찾을 수 없습니다: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"❌ Flow document rejected: {e}")
        sys.exit(1)

    print(f"Loaded flow: {args.file} ({len(session.graph)} nodes, {len(session.graph.connections)} connections)")

    if args.analyze:
        print_report(session)

    if args.export:
        FlowLoader().save_to_file(session.export_document(), args.export)
        print(f"✅ Flow exported: {args.export}")

    if args.validate_only or not (args.analyze or args.export):
        success = validate_only(session, args.strict)
        sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
