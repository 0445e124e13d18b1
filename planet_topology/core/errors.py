class TopologyError(Exception):
    """Base error for the topology core."""


class InvalidParameterError(TopologyError, ValueError):
    """Raised before any computation when a numeric input is out of range."""


class TopologyAnomalyError(TopologyError):
    """Raised by validation tooling when a built mesh violates a topology target."""

    def __init__(self, anomalies):
        self.anomalies = list(anomalies)
        lines = "; ".join(a.message for a in self.anomalies)
        super().__init__(f"{len(self.anomalies)} topology anomalies: {lines}")
