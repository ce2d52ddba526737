"""Command-line interface for compressing images into square thumbnails.

Environment variables:
    LOG_LEVEL: Logging level (default: WARNING)
    MEDIAPRESS_*: Compression settings, see mediapress.config
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from .codecs.capabilities import StaticCapabilities, default_capabilities
from .config import CompressionConfig, load_config
from .core.errors import ConfigError, MediaPressError
from .core.models import Codec, EncodedResult, SourceImage
from .core.pipeline import MediaCompressor
from .logger import configure_logging

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff", ".tif", ".avif"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_image(filepath: str | Path) -> bool:
    """Check if a file is an image based on extension."""
    return Path(filepath).suffix.lower() in IMAGE_EXTENSIONS


def get_config(args) -> CompressionConfig:
    """Load configuration from file/environment, then apply command-line overrides."""
    try:
        config = load_config(args.config)
        budget_kb = getattr(args, "budget_kb", None)
        budget = budget_kb * 1024 if budget_kb is not None else None
        return config.replace(
            max_dimension=getattr(args, "max_dimension", None),
            budget_bytes=budget,
        )
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)


def build_compressor(args) -> MediaCompressor:
    capabilities = None
    if getattr(args, "codec", None):
        capabilities = StaticCapabilities([Codec.from_name(args.codec)])
    return MediaCompressor(config=get_config(args), capabilities=capabilities)


def _output_path(filepath: Path, base: Path, output_dir: Path, result: EncodedResult, taken: set[Path]) -> Path:
    """Pick where a thumbnail goes without clobbering its source or another output.

    ``photo.png`` becomes ``photo.jpg``; when that is the source itself or was
    already written in this run, the source suffix is kept (``photo.png.jpg``).
    """
    relative = filepath.relative_to(base) if filepath != base else Path(filepath.name)
    extension = result.codec.extension
    source = filepath.resolve()

    for candidate in (relative.with_suffix(extension), relative.with_name(relative.name + extension)):
        out_path = output_dir / candidate
        resolved = out_path.resolve()
        if resolved != source and resolved not in taken:
            taken.add(resolved)
            return out_path

    raise FileExistsError(f"No free output name for {filepath} in {output_dir}")


def _compress_file(
    compressor: MediaCompressor,
    filepath: Path,
    base: Path,
    output_dir: Path,
    taken: set[Path],
) -> tuple[Path, EncodedResult]:
    result = compressor.compress(SourceImage.from_path(filepath))
    out_path = _output_path(filepath, base, output_dir, result, taken)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(result.data)
    return out_path, result


def _report(filepath: Path, out_path: Path, result: EncodedResult, as_json: bool, write=print) -> None:
    if as_json:
        write(json.dumps({"source": str(filepath), "output": str(out_path), **result.to_dict()}))
    else:
        write(
            f"{filepath.name} -> {out_path} "
            f"({result.codec.name}, {result.width}x{result.height}, {result.size_kb}KB)"
        )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def compress(args):
    """Compress a single image or every image under a directory."""
    compressor = build_compressor(args)
    path = Path(args.path)
    output_dir = Path(args.output)

    if path.is_file():
        try:
            out_path, result = _compress_file(compressor, path, path, output_dir, set())
        except (MediaPressError, OSError) as e:
            print(f"Error: Could not compress {path}: {e}")
            sys.exit(1)
        _report(path, out_path, result, args.json)
        return

    if not path.is_dir():
        print(f"Error: {path} does not exist")
        sys.exit(1)

    files = sorted(p for p in path.rglob("*") if p.is_file() and is_image(p))
    done = 0
    failed = 0
    total_in = 0
    total_out = 0
    # sources are never valid output targets
    taken = {p.resolve() for p in files}

    for filepath in tqdm(files, desc="Compressing", unit="img", disable=args.json):
        try:
            out_path, result = _compress_file(compressor, filepath, path, output_dir, taken)
        except (MediaPressError, OSError) as e:
            tqdm.write(f"Warning: Could not compress {filepath}: {e}")
            failed += 1
            continue
        _report(filepath, out_path, result, args.json, write=tqdm.write)
        done += 1
        total_in += filepath.stat().st_size
        total_out += result.size

    if not args.json:
        print(
            f"\nCompressed {done} image(s), {failed} failed. "
            f"{round(total_in / 1024)}KB -> {round(total_out / 1024)}KB"
        )
    if failed and not done:
        sys.exit(1)


def probe(args):
    """Show which codecs this runtime can use, in fallback order."""
    codecs = default_capabilities().supported_codecs()
    for rank, codec in enumerate(codecs, start=1):
        print(f"{rank}. {codec.name:<5} {codec.mime_type}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Compress images into square thumbnails under a byte budget",
        epilog="Environment variables: LOG_LEVEL, MEDIAPRESS_MAX_DIMENSION, MEDIAPRESS_BUDGET_BYTES",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML config file with compression settings",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Logging level (default: $LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- compress ---
    compress_parser = subparsers.add_parser(
        "compress",
        help="Compress an image file or a directory of images",
    )
    compress_parser.add_argument("path", help="Image file or directory to compress")
    compress_parser.add_argument("--output", "-o", default="compressed", help="Output directory (default: compressed)")
    compress_parser.add_argument("--max-dimension", "-m", type=int, default=None, help="Longest side before cropping (default: 1200)")
    compress_parser.add_argument("--budget-kb", "-b", type=int, default=None, help="Target size in KB (default: 500)")
    compress_parser.add_argument(
        "--codec",
        choices=[c.name.lower() for c in Codec],
        default=None,
        help="Force a codec (JPEG remains the fallback)",
    )
    compress_parser.add_argument("--json", action="store_true", help="Print one JSON object per image")
    compress_parser.set_defaults(func=compress)

    # --- probe ---
    probe_parser = subparsers.add_parser(
        "probe",
        help="List the codecs supported by this runtime",
    )
    probe_parser.set_defaults(func=probe)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
