import numpy as np
import pandas as pd
import torch
import torch.nn as nn
from skorch import NeuralNetBinaryClassifier

ACTIVATIONS = {
    "relu": nn.ReLU,
    "tanh": nn.Tanh,
    "sigmoid": nn.Sigmoid,
    "elu": nn.ELU,
}


class MLPModule(nn.Module):
    """Single hidden layer feed-forward network returning logits."""

    def __init__(self, d_in=1, hidden_units=5, dropout=0.1, activation="relu"):
        super().__init__()
        if activation not in ACTIVATIONS:
            raise ValueError(
                f"Unknown {activation=}, choose one of {list(ACTIVATIONS)}"
            )
        self.net = nn.Sequential(
            nn.Linear(d_in, hidden_units),
            ACTIVATIONS[activation](),
            nn.Dropout(dropout),
            nn.Linear(hidden_units, 1),
        )

    def forward(self, X):
        return self.net(X).squeeze(-1)


class MLPClassifier:
    """Feed-forward network trained for a fixed number of epochs on all rows."""

    def __init__(
        self,
        hidden_units=5,
        dropout=0.1,
        epochs=100,
        activation="relu",
        lr=0.01,
        batch_size=32,
        random_state=42,
    ):
        self.hidden_units = hidden_units
        self.dropout = dropout
        self.epochs = epochs
        self.activation = activation
        self.lr = lr
        self.batch_size = batch_size
        self.random_state = random_state

    def get_params(self) -> dict:
        return {
            "hidden_units": self.hidden_units,
            "dropout": self.dropout,
            "epochs": self.epochs,
            "activation": self.activation,
            "lr": self.lr,
            "batch_size": self.batch_size,
            "random_state": self.random_state,
        }

    @staticmethod
    def _to_numpy(X) -> np.ndarray:
        return (X.values if isinstance(X, pd.DataFrame) else np.asarray(X)).astype(
            np.float32
        )

    def fit(self, X, y, **kwargs):
        torch.manual_seed(self.random_state)
        X_np = self._to_numpy(X)
        y_np = (y.values if hasattr(y, "values") else np.asarray(y)).astype(np.float32)
        self.feature_names_ = (
            list(X.columns) if isinstance(X, pd.DataFrame) else None
        )

        self.net = NeuralNetBinaryClassifier(
            MLPModule,
            module__d_in=X_np.shape[1],
            module__hidden_units=self.hidden_units,
            module__dropout=self.dropout,
            module__activation=self.activation,
            criterion=nn.BCEWithLogitsLoss,
            optimizer=torch.optim.Adam,
            lr=self.lr,
            max_epochs=self.epochs,
            batch_size=self.batch_size,
            train_split=None,
            device="cpu",
            verbose=0,
        )
        self.net.fit(X_np, y_np)
        return self

    def predict_proba(self, X):
        return self.net.predict_proba(self._to_numpy(X))

    def predict(self, X):
        proba = self.predict_proba(X)
        return (proba[:, 1] >= 0.5).astype(int)

    def training_loss(self) -> pd.Series:
        """Per-epoch training loss from the skorch history."""
        return pd.Series(self.net.history[:, "train_loss"], name="train_loss")
