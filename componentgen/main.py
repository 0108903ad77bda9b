import argparse
import logging
import os
import sys

from componentgen.fix.fix import fix_component_file, fix_package
from componentgen.generate.generator import GenerationError, generate_component_file
from componentgen.utils.file_utils import JsonFileError

LOG_LEVELS = ["debug", "info", "warning", "error"]


def _add_common_arguments(parser):
    parser.add_argument('-p', '--package', required=True, help='Directory of the package to look in')
    parser.add_argument('-m', '--module-root', default='.',
                        help='Directory where we should look for dependencies, relative to the package directory (default: .)')
    parser.add_argument('-l', '--level', choices=LOG_LEVELS,
                        default=os.environ.get("COMPONENTGEN_LOG_LEVEL", "info").lower(),
                        help='Level of the logger (default: info)')
    parser.add_argument('--print', dest='print_output', action='store_true',
                        help='Print output to standard output instead of writing files')


def main():
    parser = argparse.ArgumentParser(description='Generate and fix components.js component files for TypeScript classes')
    subparsers = parser.add_subparsers(dest='function', help='Available functions')

    parser_generate = subparsers.add_parser('generate', help='Generate a component file for a class')
    _add_common_arguments(parser_generate)
    parser_generate.add_argument('-c', '--class-name', required=True, help='Class to generate a component for')
    parser_generate.add_argument('-o', '--output', default=None,
                                 help='Write output to a specific file (default: components/Actor/<class>.jsonld)')

    parser_fix = subparsers.add_parser('fix', help='Fill in what is missing in an existing component file')
    _add_common_arguments(parser_fix)
    parser_fix.add_argument('-c', '--component', required=True,
                            help='Path of the existing .jsonld file, relative to the package directory')

    parser_fix_package = subparsers.add_parser('fix_package', help='Fix every component file of a package')
    _add_common_arguments(parser_fix_package)

    args = parser.parse_args()

    if not args.function:
        parser.print_help()
        return

    logging.basicConfig(level=args.level.upper(), format="%(levelname)s: %(message)s")

    try:
        if args.function == 'generate':
            generate_component_file(args.package, args.class_name, args.output, args.module_root, args.print_output)
        elif args.function == 'fix':
            fix_component_file(args.package, args.component, args.module_root, args.print_output)
        elif args.function == 'fix_package':
            fixed = fix_package(args.package, args.module_root, args.print_output)
            logging.getLogger(__name__).info(f"Fixed {fixed} component files")
    except (GenerationError, JsonFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
