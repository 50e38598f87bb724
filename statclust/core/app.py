# statclust/core/app.py

"""statclust - application main process."""

import logging
import time
from pathlib import Path
from typing import List, Optional

from statclust.config.loader import AppConfig
from statclust.core.errors import ClusterAnalysisError
from statclust.core.interfaces import AnalysisResult
from statclust.plugins import ClusteringFactory, IngestionFactory
from statclust.preprocessing.tools import build_processed_data
from statclust.reporting.writer import write_centers, write_result
from statclust.utils.logging_config import log_observer
from statclust.visualization.plot import plot_dendrogram


class App:
    """Application entry point for statclust."""

    def __init__(self, config: AppConfig):
        """Initialize the App with a given configuration."""
        self.config = config
        self.reader = IngestionFactory.create(config.ingestion)
        self.clustering = ClusteringFactory.create(config.clustering, observer=log_observer)
        self.result: Optional[AnalysisResult] = None
        self.outputs: List[Path] = []

    def run(self) -> AnalysisResult:
        """Load the data, run the analysis and write its reports."""
        t_start = time.time()
        method = self.config.clustering.method.lower()
        logging.info('Starting %s cluster analysis', method)

        try:
            df = self.reader.load()
            data = build_processed_data(
                df,
                self.config.variables,
                label_field=self.config.label_field,
                standardize=self.config.standardize,
                standardize_by=self.config.standardize_by,
            )
        except ClusterAnalysisError as exc:
            logging.error('Data preparation failed: %s', exc)
            self.result = AnalysisResult(method=method, errors=[str(exc)])
            return self.result

        self.result = self.clustering.analyze(data)
        if self.result.ok:
            self._report(self.result)

        logging.info('Finished statclust run in %.3f seconds', time.time() - t_start)
        return self.result

    def _report(self, result: AnalysisResult) -> None:
        """Write result tables, the final k-means centers and the dendrogram plot."""
        rpt = self.config.reporting
        self.outputs = write_result(result, rpt.results_folder)
        if rpt.final_centers_file is not None and 'final_centers' in result.tables:
            out = write_centers(result.tables['final_centers'], rpt.final_centers_file)
            self.outputs.append(out)
        if rpt.plots_folder is not None and 'dendrogram' in result.tables:
            rpt.plots_folder.mkdir(parents=True, exist_ok=True)
            out = plot_dendrogram(result.tables['dendrogram'], rpt.plots_folder / 'dendrogram.png')
            self.outputs.append(out)
            logging.debug('Dendrogram written to %s', out)
