"""
jaxgam Quickstart
=================

Build a step-function additive model and rank its terms.
"""

import tempfile
from pathlib import Path

import numpy as np
from sklearn.datasets import make_regression
from sklearn.metrics import r2_score
from sklearn.model_selection import train_test_split

from jaxgam import AdditiveModel, Mode, StepFunction, diagnose, rank_terms
from jaxgam.gam import load, save


def fit_round(X, residual, n_bins=16, shrinkage=0.8):
    """One backfitting round: a binned mean of the residual per feature."""
    functions = []
    for j in range(X.shape[1]):
        edges = np.unique(np.quantile(X[:, j], np.linspace(0, 1, n_bins + 1)[1:-1]))
        splits = np.append(edges, np.inf)
        bins = np.searchsorted(splits, X[:, j], side="left")
        predictions = np.array(
            [residual[bins == b].mean() if np.any(bins == b) else 0.0 for b in range(len(splits))]
        )
        f = StepFunction(j, splits, predictions).scale_by(shrinkage)
        residual = residual - np.asarray(f.evaluate_batch(X[:, j]))
        functions.append(f)
    return functions, residual


def build_model(X, y, rounds=5):
    model = AdditiveModel(intercept=float(np.mean(y)))
    residual = y - model.intercept
    for _ in range(rounds):
        functions, residual = fit_round(X, np.asarray(residual))
        for f in functions:
            model.add((f.attribute_index,), f)
    return model


def main():
    print("=" * 60)
    print(" jaxgam Quickstart")
    print("=" * 60)

    X, y = make_regression(
        n_samples=1000, n_features=8, n_informative=3, noise=5.0, random_state=0
    )
    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=0.2, random_state=42
    )
    print(f"Train: {len(X_train)}, Test: {len(X_test)}, Features: {X.shape[1]}")

    model = build_model(X_train, y_train)
    print(f"\nComponents: {len(model)}")
    print(f"Test R²: {r2_score(y_test, model.predict(X_test)):.4f}")

    # One function per feature, same predictions
    compressed = model.compress()
    print(f"Compressed components: {len(compressed)}")

    for mode in (Mode.L2, Mode.L1):
        print(f"\nTerm weights ({mode.value}):")
        for element in rank_terms(diagnose(compressed, X_test, mode=mode)):
            print(f"  {element.to_line()}")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "model.txt"
        save(compressed, path)
        reloaded = load(path)
        same = np.allclose(reloaded.predict(X_test), compressed.predict(X_test))
        print(f"\nSaved and reloaded {path.name}: predictions match = {same}")


if __name__ == "__main__":
    main()
