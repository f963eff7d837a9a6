"""
Evaluation Framework
====================
Validation metrics reported at the end of each training run.

Modules:
    metrics - Confusion-matrix metrics (POD, FAR, CSI, F1, Brier, AUC) and per-target MAE/RMSE
"""
