from __future__ import annotations
import argparse, yaml
from pathlib import Path
from typing import List, Optional
from bgmatte.schemas.config import AppConfig
from bgmatte.utils.logging_utils import get_logger
from bgmatte.pipeline.io import discover_images
from bgmatte.pipeline.orchestrator import run_images

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Border flood-fill background remover")
    ap.add_argument("--config", type=Path, default=Path("configs/default.yaml"))
    ap.add_argument("--input-dir", type=Path)
    ap.add_argument("--output-dir", type=Path)
    ap.add_argument("--threshold", type=float, help="sensitivity 1..100")
    ap.add_argument("--blur", type=int, help="edge smoothness 0..10 (0 = off)")
    ap.add_argument("--engine", choices=["frontier", "queue"])
    ap.add_argument("--limit", type=int)
    return ap.parse_args(argv)

def load_config(path: Path) -> AppConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return AppConfig.model_validate(raw)

def apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    # re-validate so the clamping validators see CLI values too
    data = cfg.model_dump()
    if args.input_dir:
        data["paths"]["input_dir"] = str(args.input_dir)
    if args.output_dir:
        data["paths"]["output_dir"] = str(args.output_dir)
    if args.threshold is not None:
        data["masking"]["threshold"] = args.threshold
    if args.blur is not None:
        data["blur"]["radius"] = args.blur
    if args.engine:
        data["masking"]["engine"] = args.engine
    if args.limit:
        data["run"]["limit"] = args.limit
    return AppConfig.model_validate(data)

def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = apply_overrides(load_config(args.config), args)

    log = get_logger("main", Path(cfg.paths.logs_dir))
    log.info("🚀 Starting background removal run")
    log.info(f"📁 input_dir={cfg.paths.input_dir} | output_dir={cfg.paths.output_dir} | masks_dir={cfg.paths.masks_dir} | limit={cfg.run.limit}")

    input_dir = Path(cfg.paths.input_dir)
    images = discover_images(input_dir, cfg.run.limit) if input_dir.is_dir() else []
    if not images:
        log.error(f"❌ No images found in {input_dir}. Supported: png, jpg, jpeg, webp.")
        raise SystemExit(1)

    run_images(
        images=images,
        output_dir=Path(cfg.paths.output_dir),
        logs_dir=Path(cfg.paths.logs_dir),
        cfg=cfg,
        masks_dir=Path(cfg.paths.masks_dir) if cfg.run.save_masks else None,
    )
    log.info("🎉 Done.")

if __name__ == "__main__":
    main()
