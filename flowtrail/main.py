#!/usr/bin/env python
"""
Flow Trails CLI - Particle trails steered by a flow field

Usage:
    python -m flowtrail.main [options]

Examples:
    python -m flowtrail.main                             # HAZADUS text field, 120 frame GIF
    python -m flowtrail.main --text FLOW -o flow.gif     # Custom text
    python -m flowtrail.main --mode procedural --zoom 0.11 --curve 16
    python -m flowtrail.main --preset noise_drift --preview
"""

import argparse
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Particle trails steered by text-derived or procedural flow fields",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Field Modes:
  pixel       - Angles from the grayscale of rendered text (or --image),
                particles spawn only on the glyphs
  procedural  - (cos(col * zoom) + sin(row * zoom)) * curve over the whole surface
  noise       - Perlin noise angles over the whole surface

Heading Modes:
  smoothed    - Turn toward the cell angle by a fixed step each tick
  direct      - Snap straight onto the cell angle

Examples:
  %(prog)s                                    # Default text field
  %(prog)s --text FLOW --font Arial           # Different text and font
  %(prog)s --image logo.png                   # Field from an image
  %(prog)s --mode procedural --heading direct
  %(prog)s --preset procedural_waves          # Use a preset
  %(prog)s --preview --debug                  # Live window with overlay
        """
    )

    parser.add_argument(
        '--text',
        type=str,
        default=None,
        help='Text rendered as the field source (default: HAZADUS)'
    )

    parser.add_argument(
        '--image',
        type=str,
        default=None,
        metavar='PATH',
        help='Image used as the field source instead of text'
    )

    parser.add_argument(
        '--font',
        type=str,
        default=None,
        help='Font family or .ttf path for the text (default: Impact)'
    )

    parser.add_argument(
        '-m', '--mode',
        type=str,
        default=None,
        choices=['pixel', 'procedural', 'noise'],
        help='Field mode (default: pixel)'
    )

    parser.add_argument(
        '--heading',
        type=str,
        default=None,
        choices=['smoothed', 'direct'],
        help='How particles turn toward the field angle (default: smoothed)'
    )

    parser.add_argument(
        '-n', '--particles',
        type=int,
        default=None,
        help='Number of particles (default: 1000)'
    )

    parser.add_argument(
        '--tail',
        type=int,
        default=None,
        help='Maximum trail length in points (default: 170)'
    )

    parser.add_argument(
        '--cell-size',
        type=int,
        default=None,
        help='Field cell size in pixels (default: 10)'
    )

    parser.add_argument(
        '--zoom',
        type=float,
        default=None,
        help='Procedural field frequency (default: 0.5)'
    )

    parser.add_argument(
        '--curve',
        type=float,
        default=None,
        help='Procedural/noise field amplitude (default: 0.6)'
    )

    parser.add_argument(
        '-W', '--width',
        type=int,
        default=800,
        help='Surface width, snapped down to a multiple of the cell size (default: 800)'
    )

    parser.add_argument(
        '-H', '--height',
        type=int,
        default=400,
        help='Surface height (default: 400)'
    )

    parser.add_argument(
        '-f', '--frames',
        type=int,
        default=None,
        help='Number of frames to export (default: 120)'
    )

    parser.add_argument(
        '--warmup',
        type=int,
        default=0,
        help='Simulation steps before the first exported frame (default: 0)'
    )

    parser.add_argument(
        '--format',
        type=str,
        default=None,
        choices=['gif', 'frames'],
        help='Output format (default: gif)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output path (default: flow.gif or flow_frames/)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible output'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Draw the grid, the field source and an FPS readout'
    )

    parser.add_argument(
        '--preview',
        action='store_true',
        help='Open real-time preview window (requires pygame)'
    )

    parser.add_argument(
        '--preset',
        type=str,
        default=None,
        metavar='NAME',
        help='Use a preset configuration (e.g., hazadus, procedural_waves)'
    )

    parser.add_argument(
        '--list-presets',
        action='store_true',
        help='List all available presets and exit'
    )

    parser.add_argument(
        '--preset-info',
        type=str,
        default=None,
        metavar='NAME',
        help='Show detailed info about a preset and exit'
    )

    parser.add_argument(
        '--save-preset',
        type=str,
        default=None,
        metavar='NAME',
        help='Save the resulting settings as a user preset and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show debug logging'
    )

    return parser


def config_overrides(args) -> dict:
    """FlowConfig fields set explicitly on the command line"""
    overrides = {
        'text': args.text,
        'source_image': args.image,
        'font': args.font,
        'field_mode': args.mode,
        'heading_mode': args.heading,
        'particle_count': args.particles,
        'max_trail_length': args.tail,
        'cell_size': args.cell_size,
        'zoom': args.zoom,
        'curve': args.curve,
        'seed': args.seed,
    }
    return {k: v for k, v in overrides.items() if v is not None}


def list_presets_command() -> None:
    from flowtrail.core.presets import get_preset_manager
    manager = get_preset_manager()

    print("Available Flow Presets:\n")

    for tag in manager.list_tags():
        presets = manager.list_by_tag(tag)
        if presets:
            print(f"  [{tag.upper()}]")
            for name in presets:
                preset = manager.get(name)
                desc = preset.description[:50] + "..." if len(preset.description) > 50 else preset.description
                print(f"    {name:<20} - {desc}")
            print()

    print(f"Total: {len(manager.list_all())} presets")
    print("\nUsage: --preset <name>")
    print("Details: --preset-info <name>")


def preset_info_command(name: str) -> bool:
    from flowtrail.core.presets import get_preset_manager
    manager = get_preset_manager()

    preset = manager.get(name)
    if not preset:
        print(f"Error: Preset '{name}' not found")
        print("Use --list-presets to see available presets")
        return False

    print(f"Preset: {preset.name}" + ("" if manager.is_builtin(name) else " (user)"))
    print(f"Description: {preset.description}")
    print("\nSettings:")
    for key, value in preset.settings.items():
        print(f"  {key}: {value}")
    print(f"\nFrames: {preset.frames}")
    print(f"Format: {preset.format}")

    if preset.tags:
        print(f"\nTags: {', '.join(preset.tags)}")
    return True


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Preset listing/info doesn't touch the renderer
    if args.list_presets:
        list_presets_command()
        sys.exit(0)

    if args.preset_info:
        sys.exit(0 if preset_info_command(args.preset_info) else 1)

    from flowtrail import FlowConfig, render_animation
    from flowtrail.core import get_preset_manager, preview, check_pygame_available

    frames = args.frames
    output_format = args.format

    try:
        if args.preset:
            preset = get_preset_manager().get(args.preset)
            if not preset:
                print(f"Error: Preset '{args.preset}' not found")
                print("Use --list-presets to see available presets")
                sys.exit(1)

            print(f"Using preset: {args.preset} ({preset.description})")
            config = preset.to_config(**config_overrides(args))
            frames = frames if frames is not None else preset.frames
            output_format = output_format or preset.format
        else:
            config = FlowConfig.from_dict(config_overrides(args))

        if config.source_image and not Path(config.source_image).exists():
            print(f"Error: Image file not found: {config.source_image}")
            sys.exit(1)

        if args.save_preset:
            manager = get_preset_manager()
            preset = manager.create_preset(
                args.save_preset,
                config,
                description="Saved from the command line",
                frames=frames if frames is not None else 120,
                format=output_format or 'gif',
            )
            path = manager.save_preset(preset)
            print(f"Saved preset: {path}")
            return

        if args.preview:
            if not check_pygame_available():
                print("Error: Preview requires pygame. Install with: pip install pygame")
                sys.exit(1)

            print(f"Opening preview window ({args.width}x{args.height})...")
            print("Controls: SPACE=debug overlay, P=pause, S=save frame, ESC=quit")
            preview(config, args.width, args.height, debug=args.debug)
            print("Preview closed.")
            return

        frames = frames if frames is not None else 120
        output_format = output_format or 'gif'
        output_path = args.output or ('flow.gif' if output_format == 'gif' else 'flow_frames')

        print(f"Rendering {frames} frames ({config.field_mode} field, "
              f"{config.particle_count} particles)...")

        output = render_animation(
            output_path,
            config=config,
            width=args.width,
            height=args.height,
            frames=frames,
            format=output_format,
            warmup=args.warmup,
            debug=args.debug,
        )

        if isinstance(output, list):
            print(f"Output: {len(output)} frames in {output_path}")
        else:
            print(f"Output: {output}")
        print("Done!")

    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
