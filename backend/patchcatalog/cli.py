#!/usr/bin/env python3
"""
Patch Catalog - Main CLI Entry Point
====================================
Unified CLI for all catalog operations.

Usage:
    patchcatalog import ~/Patches/Factory -l Factory
    patchcatalog patches --bank muse --loved
    patchcatalog banks
    patchcatalog update "/path/to/vox humana.mmp" --love --category Pads
    patchcatalog export ./exported /path/a.mmp /path/b.mmp
    patchcatalog info
"""

import argparse
import asyncio
import sys

from .config import configure_logging
from .database import CatalogDB


def cmd_import(args, db):
    """Handle import command."""
    from .ingest import import_patches_from_directory

    patches = asyncio.run(import_patches_from_directory(args.root_dir, args.library, db))

    print(f"\nImported {len(patches)} new patches")
    for patch in patches:
        print(f"  {patch.bank}/{patch.name}" + (" [custom]" if patch.custom else ""))

    return 0


def cmd_patches(args, db):
    """Handle patches listing command."""
    from .filters import filter_patches
    from .models import PatchFilter

    patch_filter = PatchFilter(
        loved=args.loved,
        custom=args.custom,
        category=args.category,
        tag=args.tag,
        bank=args.bank,
        library=args.library
    )
    patches = sorted(filter_patches(db.load_patches(), patch_filter), key=lambda p: p.path)

    print(f"\n{len(patches)} patches:\n")
    for patch in patches:
        flags = ("*" if patch.loved else " ") + ("U" if patch.custom else " ")
        print(f"  {flags} {patch.library}/{patch.bank}/{patch.name}")
        if args.verbose:
            print(f"      Path: {patch.path}")
            print(f"      Category: {patch.category or '-'}")
            print(f"      Tags: {', '.join(patch.tags) or '-'}")
            print(f"      Checksum: {patch.checksum}")

    return 0


def cmd_banks(args, db):
    """Handle banks listing command."""
    banks = db.load_banks()

    print(f"\n{len(banks)} banks:\n")
    for bank in banks:
        count = len(db.get_patches_for_bank(bank.id))
        kind = "custom" if bank.custom else "factory"
        print(f"  ID {bank.id}: {bank.name} [{bank.library}] {kind}, {count} patches")

    return 0


def cmd_update(args, db):
    """Handle metadata update command."""
    from .editor import MetadataEditor
    from .models import PatchUpdate

    updates = PatchUpdate(
        name=args.name,
        loved=args.loved,
        category=args.category,
        tags=args.tags
    )

    if not MetadataEditor(db).update(args.path, updates):
        print(f"No patch stored at {args.path}")
        return 1

    print(f"Updated {args.path}")
    return 0


def cmd_export(args, db):
    """Handle export command."""
    from .export import export_patches

    written = export_patches(args.paths, args.destination)
    for target in written:
        print(f"  {target}")
    print(f"\nExported {len(written)} patches to {args.destination}")
    return 0


def cmd_info(args, db):
    """Handle info command."""
    stats = db.get_statistics()

    print("\n" + "="*50)
    print("PATCH CATALOG INFO")
    print("="*50)
    print(f"Database: {db.db_path}")
    print(f"Total Patches: {stats['total_patches']}")
    print(f"Loved: {stats['loved_patches']}")
    print(f"Custom: {stats['custom_patches']}")
    print(f"Total Banks: {stats['total_banks']}")
    print("\nPatches by Library:")
    for library, count in stats['by_library'].items():
        print(f"  {library or '-'}: {count}")
    print("\nPatches by Bank:")
    for bank in stats['by_bank']:
        print(f"  {bank['name']} [{bank['library']}]: {bank['patches']}")

    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='patchcatalog',
        description='Patch Catalog - Import, browse and tag synthesizer patch libraries',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--db', default=None,
                        help='Catalog database path (default: $PATCHCATALOG_DB_PATH)')
    parser.add_argument('--log-level', default=None, help='Logging level (default: INFO)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # IMPORT command
    import_parser = subparsers.add_parser(
        'import',
        help='Import patches from a library directory'
    )
    import_parser.add_argument('root_dir', help='Directory containing the patch library')
    import_parser.add_argument('-l', '--library', default=None,
                               help='Library label (default: directory name)')
    import_parser.set_defaults(func=cmd_import)

    # PATCHES command
    patches_parser = subparsers.add_parser(
        'patches',
        help='List patches in the catalog'
    )
    patches_parser.add_argument('--loved', action='store_true', help='Only loved patches')
    patches_parser.add_argument('--custom', action='store_true', help='Only patches from user banks')
    patches_parser.add_argument('-c', '--category', help='Filter by category')
    patches_parser.add_argument('-t', '--tag', help='Filter by tag')
    patches_parser.add_argument('-b', '--bank', help='Filter by bank name')
    patches_parser.add_argument('-l', '--library', help='Filter by library')
    patches_parser.add_argument('-v', '--verbose', action='store_true', help='Show all fields')
    patches_parser.set_defaults(func=cmd_patches)

    # BANKS command
    banks_parser = subparsers.add_parser(
        'banks',
        help='List banks in the catalog'
    )
    banks_parser.set_defaults(func=cmd_banks)

    # UPDATE command
    update_parser = subparsers.add_parser(
        'update',
        help='Edit metadata of a stored patch'
    )
    update_parser.add_argument('path', help='Path of the patch')
    update_parser.add_argument('--name', default=None, help='New display name')
    love_group = update_parser.add_mutually_exclusive_group()
    love_group.add_argument('--love', dest='loved', action='store_const', const=True, default=None)
    love_group.add_argument('--unlove', dest='loved', action='store_const', const=False)
    update_parser.add_argument('-c', '--category', default=None, help='Category label')
    update_parser.add_argument('-t', '--tag', dest='tags', action='append', default=None,
                               help='Tag (can be repeated; replaces existing tags)')
    update_parser.set_defaults(func=cmd_update)

    # EXPORT command
    export_parser = subparsers.add_parser(
        'export',
        help='Copy patches into a numbered bank tree'
    )
    export_parser.add_argument('destination', help='Destination directory')
    export_parser.add_argument('paths', nargs='+', help='Patch files to export')
    export_parser.set_defaults(func=cmd_export)

    # INFO command
    info_parser = subparsers.add_parser(
        'info',
        help='Display catalog statistics'
    )
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.log_level)

    try:
        with CatalogDB(args.db) as db:
            return args.func(args, db)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
