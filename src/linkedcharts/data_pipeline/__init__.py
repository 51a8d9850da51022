from linkedcharts.data_pipeline.loaders import (
    DatasetLoadError,
    feature_columns,
    load_breast_cancer_dataset,
    load_stock_prices,
)

__all__ = [
    "DatasetLoadError",
    "feature_columns",
    "load_breast_cancer_dataset",
    "load_stock_prices",
]
