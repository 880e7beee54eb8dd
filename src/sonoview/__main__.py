"""
SonoView CLI entry point.

Runs one or all detection algorithms on an image file and prints the results.

Usage:
    python -m sonoview image.png                     # RANSAC lines
    python -m sonoview image.png --method all        # Every algorithm
    python -m sonoview --help                        # Show help
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .core.config import Config, DetectionConfig
from .core.detector import DetectionMethod, UltrasoundDetector
from .core.result import CircleResult, LineResult


def setup_logging(config: Config, debug: bool = False) -> None:
    """Configure logging based on config."""
    log_config = config["logging"]
    level = logging.DEBUG if debug else getattr(logging, log_config.get("level", "INFO"))

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = log_config.get("file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        handlers=handlers,
    )


def format_result(result: LineResult | CircleResult) -> str:
    """Render a detection result as human-readable text."""
    out = [f"{result.kind}: {result.count} found ({result.processing_time_ms:.1f} ms)"]

    if isinstance(result, LineResult):
        for i, line in enumerate(result.lines, start=1):
            out.append(
                f"  Line {i}: ({line.x1:.1f}, {line.y1:.1f}) -> ({line.x2:.1f}, {line.y2:.1f})"
            )
            out.append(f"    Length: {line.length:.1f} pixels, angle: {line.angle:.1f} deg")
            if line.inlier_count is not None:
                out.append(f"    Inliers: {line.inlier_count} ({line.confidence:.1f}%)")
    else:
        for i, circle in enumerate(result.circles, start=1):
            out.append(f"  Circle {i}: center ({circle.x:.1f}, {circle.y:.1f})")
            out.append(f"    Radius: {circle.radius:.0f} pixels")
            if circle.circularity is not None:
                out.append(f"    Circularity: {circle.circularity:.3f}")

    return "\n".join(out)


def run_detection(
    image_path: Path,
    methods: list[DetectionMethod],
    config: Config,
    auto_thresholds: bool = False,
    seed: int | None = None,
    output: Path | None = None,
) -> int:
    """
    Run detection on one image file.

    Args:
        image_path: Image to analyze
        methods: Algorithms to run, in order
        config: Application configuration
        auto_thresholds: Estimate edge thresholds from the image
        seed: RANSAC sampling seed
        output: Where to write the annotated image; with several methods the
            method name is appended to the file stem

    Returns:
        Process exit code
    """
    logger = logging.getLogger(__name__)

    image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        logger.error(f"Could not load image from: {image_path}")
        return 1

    detector = UltrasoundDetector(config.as_dict)
    params: DetectionConfig = detector.default_config
    if auto_thresholds:
        params = detector.auto_config(image)

    for method in methods:
        result = detector.detect(image, method, params, visualize=output is not None, seed=seed)
        print(format_result(result))

        if output is not None and result.visualized_image is not None:
            target = output
            if len(methods) > 1:
                target = output.with_name(f"{output.stem}_{method.value}{output.suffix}")
            target.parent.mkdir(parents=True, exist_ok=True)
            cv2.imwrite(str(target), result.visualized_image)
            logger.info(f"Annotated image saved: {target}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SonoView - Ultrasound Geometric Primitive Detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m sonoview scan.png                          RANSAC line detection
    python -m sonoview scan.png --method circles         Hough circles
    python -m sonoview scan.png --method all -o out.png  All algorithms, save overlays
        """,
    )

    parser.add_argument("image", type=Path, help="Image file to analyze")
    parser.add_argument(
        "--method",
        choices=[m.value for m in DetectionMethod] + ["all"],
        default=DetectionMethod.RANSAC_LINES.value,
        help="Detection algorithm (default: ransac)",
    )
    parser.add_argument(
        "--auto-thresholds",
        action="store_true",
        help="Estimate edge thresholds from gradient statistics",
    )
    parser.add_argument("--seed", type=int, help="RANSAC sampling seed")
    parser.add_argument("-o", "--output", type=Path, help="Write annotated image here")
    parser.add_argument("--config", type=str, help="Path to configuration directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    config_dir = Path(args.config) if args.config else None
    config = Config(config_dir)

    setup_logging(config, args.debug)

    logger = logging.getLogger(__name__)
    logger.info("SonoView starting...")
    logger.info(f"Environment: {config.env}")

    if args.method == "all":
        methods = list(DetectionMethod)
    else:
        methods = [DetectionMethod(args.method)]

    seed = args.seed if args.seed is not None else config.get("ransac.seed")

    return run_detection(
        args.image,
        methods,
        config,
        auto_thresholds=args.auto_thresholds or config.get("edges.auto", False),
        seed=seed,
        output=args.output,
    )


if __name__ == "__main__":
    sys.exit(main())
