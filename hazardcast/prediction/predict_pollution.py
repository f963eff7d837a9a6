"""
Pollution Inference
===================
Encode one (date, lon, lat) query with the cyclical encoder saved at training
time and run the trained PollutionNet.

Output indices 0-15 follow {O3, CO, SO2, NO2} x {Mean, 1st Max Value,
1st Max Hour, AQI}. The overall AQI is the maximum of the four pollutant AQIs.

Usage:
    python -m hazardcast.prediction.predict_pollution 2025-01-01 -122.9382 46.1382
"""

import argparse
import os

import numpy as np
import torch

from hazardcast.config import load_config, get_path, add_config_argument
from hazardcast.data.records import POLLUTION_TARGET_COLUMNS, AQI_INDICES
from hazardcast.features.encoder import CyclicalDateEncoder, load_encoder
from hazardcast.models.pollution_net import PollutionNet
from hazardcast.training.engine import BEST_MODEL_FILENAME, get_device
from hazardcast.utils.date_utils import parse_date_arg


def load_pollution_predictor(model_dir, device=None):
    """
    Returns:
        (PollutionNet in eval mode, CyclicalDateEncoder)
    """
    device = device or get_device()
    encoder = load_encoder(model_dir)
    if not isinstance(encoder, CyclicalDateEncoder):
        raise ValueError(f"Expected cyclical_date encoder in {model_dir}, got {encoder.kind}")
    model = PollutionNet(in_features=encoder.num_features, out_features=len(POLLUTION_TARGET_COLUMNS))
    state = torch.load(os.path.join(model_dir, BEST_MODEL_FILENAME), map_location=device)
    model.load_state_dict(state)
    model.to(device).eval()
    return model, encoder


def overall_aqi(outputs):
    """Overall US AQI: max of the O3, CO, SO2 and NO2 AQI outputs."""
    return float(max(outputs[i] for i in AQI_INDICES))


def predict_pollution(model, encoder, date_value, lon, lat):
    """
    Returns:
        (16,) numpy array in POLLUTION_TARGET_COLUMNS order
    """
    device = next(model.parameters()).device
    x = encoder.encode(date_value, lon, lat)[np.newaxis, :].astype(np.float32)
    with torch.no_grad():
        pred = model(torch.from_numpy(x).to(device))
    return pred[0].cpu().numpy()


def main(argv=None):
    ap = argparse.ArgumentParser(description="Predict pollutant metrics for a date and location")
    add_config_argument(ap)
    ap.add_argument("date", nargs="?", type=parse_date_arg, default="2025-01-01",
                    help="YYYY-MM-DD or YYYYMMDD")
    ap.add_argument("longitude", nargs="?", type=float, default=-122.9382)
    ap.add_argument("latitude", nargs="?", type=float, default=46.1382)
    ap.add_argument("--model_dir", type=str, default=None)
    args = ap.parse_args(argv)

    query_date = args.date
    cfg = load_config(args.config)
    model_dir = args.model_dir or os.path.join(get_path(cfg, 'output_dir'), 'pollution_model')

    model, encoder = load_pollution_predictor(model_dir)
    outputs = predict_pollution(model, encoder, query_date, args.longitude, args.latitude)

    print(f"\nPrediction for date={query_date:%Y-%m-%d}, lon={args.longitude}, lat={args.latitude}:")
    for name, value in zip(POLLUTION_TARGET_COLUMNS, outputs):
        print(f"{name + ':':<21}{value:.5f}")
    print(f"\nOverall US AQI:      {overall_aqi(outputs):.5f}")
    return outputs


if __name__ == "__main__":
    main()
