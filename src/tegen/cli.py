from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tegen.tegen_exceptions import TegenException


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tegen",
        description="Project-local dependency manager for CMake-based C and C++ projects.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    parser.add_argument(
        "-C",
        "--project-dir",
        default=None,
        help="Project root (default: current directory)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    init = sub.add_parser("init", help="Initialize TegenConfig.json and a CMake project.")
    init.add_argument("--defaults", action="store_true", help="Accept every default without prompting.")

    install = sub.add_parser("install", help="Install a package and add it to dependencies.")
    install.add_argument("package", help="Package (repository) name")
    install.add_argument("revision", nargs="?", default=None, help="Branch, tag or commit (default: platform branch)")

    sub.add_parser("list", help="List all dependencies from TegenConfig.json.")
    sub.add_parser("build", help="Build the project using CMake.")
    sub.add_parser("run", help="Run the built project.")
    return parser


def _print_progress(label: str, percent: float) -> None:
    end = "\n" if percent >= 100 else ""
    print(f"\rCopying {label}: {percent:.0f}%", end=end, flush=True)


def main(argv: list[str] | None = None) -> int:
    from tegen.tegen_config import TegenConfig
    from tegen.tegen_logger import TegenLogger, configure_logging

    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    project_root = Path(args.project_dir) if args.project_dir else Path.cwd()
    logger = TegenLogger()

    try:
        config = TegenConfig.load(project_root)

        if args.cmd == "init":
            from tegen.project.scaffold import ProjectScaffolder, console_prompt, defaults_prompt

            prompt = defaults_prompt if args.defaults else console_prompt
            manifest = ProjectScaffolder(project_root, config, logger, prompt=prompt).init()
            if manifest is None:
                print(f"{config.manifest_file_name} already exists in {project_root}.")
                return 0
            print(f"Initialized {config.manifest_file_name} in {project_root}:")
            print(f"- src/main.cpp\n- {config.include_dir_name}/\n- {config.build_descriptor_name}")
            print("Run 'tegen build' to build the project (requires CMake).")
            return 0

        if args.cmd == "install":
            from tegen.installer import InstallOrchestrator

            orchestrator = InstallOrchestrator(
                project_root, config=config, logger=logger, progress=_print_progress
            )
            result = orchestrator.install(args.package, args.revision)
            stream = sys.stdout if result.succeeded else sys.stderr
            print(result.describe(), file=stream)
            if result.cleanup_succeeded is False:
                print(
                    f"Warning: could not remove {orchestrator.modules_dir}",
                    file=sys.stderr,
                )
            return 0 if result.succeeded else 1

        if args.cmd == "list":
            from tegen.installer import InstallOrchestrator

            dependencies = InstallOrchestrator(project_root, config=config, logger=logger).list_dependencies()
            print("Dependencies:")
            for name, revision in sorted(dependencies.items()):
                print(f"  - {name}: {revision}")
            return 0

        from tegen.project.build_runner import BuildRunner

        # Only build and run remain; argparse rejects anything else.
        runner = BuildRunner(project_root, config, logger)
        if args.cmd == "build":
            build_dir = runner.build()
            print(f"Build completed successfully. The project is located in '{build_dir}'.")
        else:
            elapsed = runner.run()
            print(f"Finished in {elapsed:.3f}s")
        return 0
    except TegenException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
