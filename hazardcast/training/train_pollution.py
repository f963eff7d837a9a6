"""
Train Multi-Pollutant Model
===========================
Loads geocoded pollution records, encodes each date as
(year_scaled, month sin/cos, day-of-year sin/cos) plus raw lon/lat, and trains
PollutionNet to predict 16 pollutant metrics with early stopping.

The year is scaled against the configured global year bounds (encoding.year_min /
encoding.year_max), which are saved with the model so inference scales identically.

Usage:
    python -m hazardcast.training.train_pollution --config configs/default.yaml
    python -m hazardcast.training.train_pollution --pollution_csv data/pollution.csv --epochs 30

Output (out_dir):
    best_model.pt          - model state_dict
    feature_encoder.json   - cyclical encoder + year bounds
    run_meta.json          - run summary
"""

import argparse
import os
import time

import torch
import torch.nn as nn

from hazardcast.config import load_config, get_path, add_config_argument
from hazardcast.data.records import load_pollution_records, POLLUTION_TARGET_COLUMNS
from hazardcast.datasets.assembler import assemble_pollution_dataset
from hazardcast.evaluation.metrics import compute_regression_metrics
from hazardcast.features.encoder import CyclicalDateEncoder, save_encoder
from hazardcast.models.pollution_net import PollutionNet
from hazardcast.training.engine import (
    get_device, make_loaders, fit, predict_array, utc_now_iso, write_run_meta,
)
from hazardcast.utils.seed import set_seed, make_rng


def prepare_pollution_dataset(records, encoding_cfg, rng, train_ratio=0.8):
    """
    Records -> encoded, split training set.

    Returns:
        (TrainValSplit, CyclicalDateEncoder)
    """
    if len(records) == 0:
        raise ValueError("No valid pollution records to train on")

    encoder = CyclicalDateEncoder(encoding_cfg['year_min'], encoding_cfg['year_max'])
    years = records["date"].dt.year
    if years.min() < encoder.year_min or years.max() > encoder.year_max:
        print(f"[Warning] Data years [{years.min()}, {years.max()}] exceed encoder bounds "
              f"[{encoder.year_min}, {encoder.year_max}]; scaled year leaves [0, 1]")

    split = assemble_pollution_dataset(records, encoder, rng, train_ratio)
    return split, encoder


def main(argv=None):
    run_started_at = time.time()

    ap = argparse.ArgumentParser(description="Train multi-pollutant air quality model")
    add_config_argument(ap)
    ap.add_argument("--pollution_csv", type=str, default=None)
    ap.add_argument("--out_dir", type=str, default=None)
    ap.add_argument("--epochs", type=int, default=None)
    ap.add_argument("--batch_size", type=int, default=None)
    ap.add_argument("--lr", type=float, default=None)
    ap.add_argument("--patience", type=int, default=None)
    ap.add_argument("--train_ratio", type=float, default=None)
    ap.add_argument("--seed", type=int, default=None)
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    train_cfg = cfg['training']
    pol_cfg = train_cfg['pollution']
    pollution_csv = args.pollution_csv or get_path(cfg, 'pollution_csv')
    out_dir = args.out_dir or os.path.join(get_path(cfg, 'output_dir'), 'pollution_model')
    epochs = args.epochs if args.epochs is not None else pol_cfg['epochs']
    batch_size = args.batch_size if args.batch_size is not None else pol_cfg['batch_size']
    lr = args.lr if args.lr is not None else pol_cfg['lr']
    patience = args.patience if args.patience is not None else pol_cfg['patience']
    train_ratio = args.train_ratio if args.train_ratio is not None else train_cfg['train_ratio']
    seed = args.seed if args.seed is not None else train_cfg['seed']

    os.makedirs(out_dir, exist_ok=True)
    run_meta_path = os.path.join(out_dir, "run_meta.json")
    run_meta = {
        "run_started_at_utc": utc_now_iso(),
        "cli_args": vars(args),
        "resolved_paths": {"pollution_csv": pollution_csv, "out_dir": out_dir},
        "encoding": cfg['encoding'],
        "status": "running",
    }

    try:
        set_seed(seed)
        rng = make_rng(seed)

        print("=" * 60)
        print("Loading data...")
        print("=" * 60)
        records = load_pollution_records(pollution_csv)

        split, encoder = prepare_pollution_dataset(records, cfg['encoding'], rng, train_ratio)
        run_meta["counts"] = {"records": int(len(records)), "train": split.n_train, "val": split.n_val}
        encoder_path = save_encoder(encoder, out_dir)
        print(f"[Encoder] Saved to {encoder_path}")

        if split.n_train == 0:
            raise ValueError(f"Empty training subset (train_ratio={train_ratio}, {split.n_val} validation rows)")
        train_dl, val_dl = make_loaders(split, batch_size)
        device = get_device()
        print(f"\n[Device] {device}")

        model = PollutionNet(
            in_features=encoder.num_features,
            out_features=len(POLLUTION_TARGET_COLUMNS),
            dropout=pol_cfg['dropout'],
        ).to(device)
        opt = torch.optim.Adam(model.parameters(), lr=lr)
        loss_fn = nn.MSELoss()

        print("\n" + "=" * 60)
        print("Training...")
        print("=" * 60)
        history = fit(model, train_dl, val_dl, opt, loss_fn, device, epochs, out_dir, patience=patience)
        run_meta["history"] = history

        if split.n_val:
            pred = predict_array(model, split.x_val, device)
            metrics = compute_regression_metrics(split.y_val, pred, names=POLLUTION_TARGET_COLUMNS)
            print("\n[Val] MAE per target:")
            for name, m in metrics.items():
                print(f"  {name:<20} {m['mae']:.5f}")
            run_meta["val_metrics"] = metrics

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
