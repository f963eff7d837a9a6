"""
Train Two-Headed Wildfire Model
===============================
Loads recorded wildfires, synthesizes local / global / never-occurred
negatives, encodes (lat, lon, year, doy) against the positives' domain
bounds, and trains FireRiskNet (fire probability + fire size).

Usage:
    python -m hazardcast.training.train_fire --config configs/default.yaml
    python -m hazardcast.training.train_fire --fire_csv data/firedata.csv --epochs 20

Output (out_dir):
    best_model.pt          - model state_dict
    feature_encoder.json   - encoder + domain bounds (required at inference)
    run_meta.json          - run summary
"""

import argparse
import os
import time

import torch

from hazardcast.config import load_config, get_path, add_config_argument
from hazardcast.data.bounds import summarize_domain
from hazardcast.data.keys import EventKeySet, deduplicate_positives
from hazardcast.data.negatives import synthesize_negatives
from hazardcast.data.records import load_fire_records
from hazardcast.datasets.assembler import assemble_fire_dataset
from hazardcast.evaluation.metrics import compute_classification_metrics, compute_regression_metrics
from hazardcast.features.encoder import CoordinateBoxEncoder, save_encoder
from hazardcast.models.fire_net import FireRiskNet, FireLoss
from hazardcast.training.engine import (
    get_device, make_loaders, fit, predict_array, utc_now_iso, write_run_meta,
)
from hazardcast.utils.seed import set_seed, make_rng


def prepare_fire_dataset(positives, sampling_cfg, rng, train_ratio=0.8):
    """
    Positives -> balanced, encoded, split training set.

    Args:
        positives: Normalized fire frame from load_fire_records / prepare_fire_frame
        sampling_cfg: cfg['sampling'] dict
        rng: numpy.random.Generator
        train_ratio: Bernoulli train probability

    Returns:
        dict with split, encoder, bounds, negatives, generation results, merged frame
    """
    positives, n_dupes = deduplicate_positives(positives)
    if n_dupes:
        print(f"[Data] Collapsed {n_dupes} positives sharing an event key")

    bounds = summarize_domain(positives)
    print(f"[Domain] lat [{bounds.lat_min}, {bounds.lat_max}], "
          f"lon [{bounds.lon_min}, {bounds.lon_max}], "
          f"year [{bounds.year_min}, {bounds.year_max}]")

    key_set = EventKeySet.build(positives)
    negatives, results = synthesize_negatives(positives, bounds, key_set, rng, **sampling_cfg)

    encoder = CoordinateBoxEncoder(bounds)
    split, merged = assemble_fire_dataset(positives, negatives, encoder, rng, train_ratio)

    return {
        "split": split,
        "encoder": encoder,
        "bounds": bounds,
        "positives": positives,
        "negatives": negatives,
        "results": results,
        "merged": merged,
    }


def main(argv=None):
    run_started_at = time.time()

    ap = argparse.ArgumentParser(description="Train wildfire occurrence/size model")
    add_config_argument(ap)
    ap.add_argument("--fire_csv", type=str, default=None)
    ap.add_argument("--out_dir", type=str, default=None)
    ap.add_argument("--epochs", type=int, default=None)
    ap.add_argument("--batch_size", type=int, default=None)
    ap.add_argument("--lr", type=float, default=None)
    ap.add_argument("--train_ratio", type=float, default=None)
    ap.add_argument("--seed", type=int, default=None)
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    train_cfg = cfg['training']
    fire_cfg = train_cfg['fire']
    fire_csv = args.fire_csv or get_path(cfg, 'fire_csv')
    out_dir = args.out_dir or os.path.join(get_path(cfg, 'output_dir'), 'wildfire_model')
    epochs = args.epochs if args.epochs is not None else fire_cfg['epochs']
    batch_size = args.batch_size if args.batch_size is not None else fire_cfg['batch_size']
    lr = args.lr if args.lr is not None else fire_cfg['lr']
    train_ratio = args.train_ratio if args.train_ratio is not None else train_cfg['train_ratio']
    seed = args.seed if args.seed is not None else train_cfg['seed']

    os.makedirs(out_dir, exist_ok=True)
    run_meta_path = os.path.join(out_dir, "run_meta.json")
    run_meta = {
        "run_started_at_utc": utc_now_iso(),
        "cli_args": vars(args),
        "resolved_paths": {"fire_csv": fire_csv, "out_dir": out_dir},
        "sampling": cfg['sampling'],
        "status": "running",
    }

    try:
        set_seed(seed)
        rng = make_rng(seed)

        print("=" * 60)
        print("Loading data...")
        print("=" * 60)
        positives = load_fire_records(fire_csv)

        print("\n" + "=" * 60)
        print("Synthesizing negatives...")
        print("=" * 60)
        prepared = prepare_fire_dataset(positives, cfg['sampling'], rng, train_ratio)
        split = prepared["split"]
        encoder = prepared["encoder"]
        run_meta["counts"] = {
            "positives": int(len(prepared["positives"])),
            "negatives": {r.strategy: {"requested": r.requested, "achieved": r.achieved}
                          for r in prepared["results"]},
            "train": split.n_train,
            "val": split.n_val,
        }
        run_meta["bounds"] = prepared["bounds"].to_dict()
        encoder_path = save_encoder(encoder, out_dir)
        print(f"[Encoder] Saved to {encoder_path}")

        if split.n_train == 0:
            raise ValueError(f"Empty training subset (train_ratio={train_ratio}, {split.n_val} validation rows)")
        train_dl, val_dl = make_loaders(split, batch_size)
        device = get_device()
        print(f"\n[Device] {device}")

        model = FireRiskNet(in_features=encoder.num_features).to(device)
        opt = torch.optim.Adam(model.parameters(), lr=lr)
        loss_fn = FireLoss(fire_cfg['class_loss_weight'], fire_cfg['size_loss_weight'])

        print("\n" + "=" * 60)
        print("Training...")
        print("=" * 60)
        history = fit(model, train_dl, val_dl, opt, loss_fn, device, epochs, out_dir)
        run_meta["history"] = history

        if split.n_val:
            prob, size = predict_array(model, split.x_val, device)
            cls_metrics = compute_classification_metrics(split.y_val[:, 0], prob[:, 0])
            size_metrics = compute_regression_metrics(split.y_val[:, 1], size[:, 0], names=["fire_size"])
            print(f"\n[Val] accuracy {cls_metrics['accuracy']:.4f}  f1 {cls_metrics['f1']:.4f}  "
                  f"auc {cls_metrics['auc']:.4f}  size MAE {size_metrics['fire_size']['mae']:.4f}")
            run_meta["val_metrics"] = {"classification": cls_metrics, "size": size_metrics}

        run_meta["status"] = "success"
        print(f"Results saved to {out_dir}")
    except BaseException:
        run_meta["status"] = "failed_or_interrupted"
        raise
    finally:
        run_meta["run_finished_at_utc"] = utc_now_iso()
        run_meta["duration_seconds"] = round(time.time() - run_started_at, 3)
        write_run_meta(run_meta_path, run_meta)


if __name__ == "__main__":
    main()
