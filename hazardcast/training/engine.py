"""
Training Engine
===============
Epoch loop, fit-with-checkpointing and batched prediction shared by the
training entry points.
"""

import json
import os
from datetime import datetime, timezone

import numpy as np
import torch
from torch.utils.data import DataLoader

from hazardcast.datasets.tabular import HazardTabularDataset

BEST_MODEL_FILENAME = "best_model.pt"


def utc_now_iso():
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def write_run_meta(path, run_meta):
    """Persist run metadata (args, counts, metrics, status) as JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(run_meta, f, indent=2)


def get_device():
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")


def make_loaders(split, batch_size):
    """DataLoaders over a TrainValSplit (train shuffled, val in order)."""
    train_ds = HazardTabularDataset(split.x_train, split.y_train)
    val_ds = HazardTabularDataset(split.x_val, split.y_val)
    print(f"[Dataset] Train: {len(train_ds)}, Val: {len(val_ds)}")
    # RandomSampler rejects an empty dataset
    train_dl = DataLoader(train_ds, batch_size=batch_size, shuffle=len(train_ds) > 0, num_workers=0)
    val_dl = DataLoader(val_ds, batch_size=batch_size, shuffle=False, num_workers=0)
    return train_dl, val_dl


def run_epoch(model, loader, opt, loss_fn, device, train=True):
    """Run one training or validation epoch. Returns mean loss per sample."""
    model.train(train)
    total = 0.0
    n = len(loader.dataset)
    if n == 0:
        return float("nan")
    for xb, yb in loader:
        xb = xb.to(device).float()
        yb = yb.to(device).float()
        with torch.set_grad_enabled(train):
            pred = model(xb)
            loss = loss_fn(pred, yb)
            if train:
                opt.zero_grad()
                loss.backward()
                torch.nn.utils.clip_grad_norm_(model.parameters(), 1.0)
                opt.step()
        total += loss.item() * xb.size(0)
    return total / n


def fit(model, train_dl, val_dl, opt, loss_fn, device, epochs, out_dir, patience=None):
    """
    Train for up to `epochs`, keeping the weights with the lowest validation loss.

    Any checkpoint left in out_dir by an earlier run is removed first, and the
    first epoch is always saved.
    With no validation samples the last epoch's weights are kept. When
    `patience` is set, training stops after that many epochs without
    validation improvement.

    Returns:
        list of {'epoch', 'train_loss', 'val_loss'} dicts
    """
    os.makedirs(out_dir, exist_ok=True)
    ckpt = os.path.join(out_dir, BEST_MODEL_FILENAME)
    if os.path.exists(ckpt):
        os.remove(ckpt)
    has_val = len(val_dl.dataset) > 0

    history = []
    best_val = float("inf")
    stale = 0
    for epoch in range(1, epochs + 1):
        tr = run_epoch(model, train_dl, opt, loss_fn, device, train=True)
        va = run_epoch(model, val_dl, opt, loss_fn, device, train=False)
        history.append({'epoch': epoch, 'train_loss': tr, 'val_loss': va})
        print(f"Epoch {epoch}: train {tr:.4f}  val {va:.4f}")

        if not has_val:
            torch.save(model.state_dict(), ckpt)
            continue
        improved = va < best_val
        if improved or epoch == 1:
            torch.save(model.state_dict(), ckpt)
        if improved:
            best_val = va
            stale = 0
        else:
            stale += 1
            if patience is not None and stale >= patience:
                print(f"[Early stop] No val improvement for {patience} epochs")
                break

    if os.path.exists(ckpt):
        model.load_state_dict(torch.load(ckpt, map_location=device))
    return history


def predict_array(model, X, device=None, batch_size=4096):
    """
    Run the model over an (N, F) array without gradients.

    Returns:
        numpy array, or a tuple of arrays for multi-output models
    """
    device = device or next(model.parameters()).device
    model.eval()
    outputs = []
    X = np.asarray(X, dtype=np.float32)
    with torch.no_grad():
        for i in range(0, len(X), batch_size):
            xb = torch.from_numpy(X[i:i + batch_size]).to(device)
            pred = model(xb)
            if isinstance(pred, (tuple, list)):
                outputs.append(tuple(p.cpu().numpy() for p in pred))
            else:
                outputs.append(pred.cpu().numpy())
    if not outputs:
        return None
    if isinstance(outputs[0], tuple):
        return tuple(np.concatenate(parts, axis=0) for parts in zip(*outputs))
    return np.concatenate(outputs, axis=0)
