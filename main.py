import os
import sys

# Patch sys.path for local imports
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from cli.cli_coverage_command import coverage_cli


def main():
    coverage_cli(prog_name="openapi-coverage")


if __name__ == "__main__":
    main()
