"""
Wildfire Inference
==================
Encode one (lat, lon, year, doy) query with the encoder saved at training time
and run the trained FireRiskNet.

Usage:
    python -m hazardcast.prediction.predict_fire --lat 29.65 --lon -82.34 --year 2026 --doy 200
    python -m hazardcast.prediction.predict_fire --model_dir outputs/wildfire_model --lat ...
"""

import argparse
import os

import numpy as np
import torch

from hazardcast.config import load_config, get_path, add_config_argument
from hazardcast.features.encoder import CoordinateBoxEncoder, load_encoder
from hazardcast.models.fire_net import FireRiskNet
from hazardcast.training.engine import BEST_MODEL_FILENAME, get_device


def load_fire_predictor(model_dir, device=None):
    """
    Load the trained model and its feature encoder.

    Returns:
        (FireRiskNet in eval mode, CoordinateBoxEncoder)
    """
    device = device or get_device()
    encoder = load_encoder(model_dir)
    if not isinstance(encoder, CoordinateBoxEncoder):
        raise ValueError(f"Expected coordinate_box encoder in {model_dir}, got {encoder.kind}")
    model = FireRiskNet(in_features=encoder.num_features)
    state = torch.load(os.path.join(model_dir, BEST_MODEL_FILENAME), map_location=device)
    model.load_state_dict(state)
    model.to(device).eval()
    return model, encoder


def predict_fire(model, encoder, lat, lon, year, doy):
    """
    Returns:
        dict with 'probability' (0..1) and 'size'
    """
    device = next(model.parameters()).device
    x = encoder.encode(lat, lon, year, doy)[np.newaxis, :].astype(np.float32)
    with torch.no_grad():
        prob, size = model(torch.from_numpy(x).to(device))
    return {"probability": float(prob[0, 0]), "size": float(size[0, 0])}


def main(argv=None):
    ap = argparse.ArgumentParser(description="Predict wildfire probability and size")
    add_config_argument(ap)
    ap.add_argument("--model_dir", type=str, default=None)
    ap.add_argument("--lat", type=float, required=True)
    ap.add_argument("--lon", type=float, required=True)
    ap.add_argument("--year", type=int, required=True)
    ap.add_argument("--doy", type=int, required=True)
    args = ap.parse_args(argv)

    if not 1 <= args.doy <= 366:
        ap.error(f"--doy must be in [1, 366], got {args.doy}")

    cfg = load_config(args.config)
    model_dir = args.model_dir or os.path.join(get_path(cfg, 'output_dir'), 'wildfire_model')

    model, encoder = load_fire_predictor(model_dir)
    result = predict_fire(model, encoder, args.lat, args.lon, args.year, args.doy)

    print(f"Probability of Fire: {result['probability'] * 100:.2f}%")
    print(f"Predicted Fire Size: {result['size']:.2f} acres")
    return result


if __name__ == "__main__":
    main()
