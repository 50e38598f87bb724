"""statclust reporting: result structures as tables, written to CSV."""

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from statclust.core.interfaces import AnalysisResult

import numpy as np

import pandas as pd


def schedule_frame(schedule) -> pd.DataFrame:
    """Agglomeration schedule table."""
    rows = [
        {
            'Stage': s.stage,
            'Cluster 1': s.clusters_combined[0],
            'Cluster 2': s.clusters_combined[1],
            'Coefficients': s.coefficients,
            'First Appears Cluster 1': s.cluster_first_appears[0],
            'First Appears Cluster 2': s.cluster_first_appears[1],
            'Next Stage': s.next_stage,
        }
        for s in schedule
    ]
    return pd.DataFrame(rows, columns=[
        'Stage', 'Cluster 1', 'Cluster 2', 'Coefficients',
        'First Appears Cluster 1', 'First Appears Cluster 2', 'Next Stage',
    ])


def memberships_frame(memberships, case_labels: Sequence[str]) -> pd.DataFrame:
    """One column per requested hierarchical solution."""
    df = pd.DataFrame({'Case': list(case_labels)})
    for m in memberships:
        df[f'{m.num_clusters} Clusters'] = m.case_assignments
    return df


def dendrogram_frame(dendrogram) -> pd.DataFrame:
    """Dendrogram internal nodes with raw and rescaled heights."""
    rows = [
        {
            'Node': node.id,
            'Stage': node.stage,
            'Left': node.left.id,
            'Right': node.right.id,
            'Height': node.height,
            'Rescaled Height': dendrogram.rescaled_height(node.height),
            'X Position': node.x_position,
        }
        for node in dendrogram.internal_nodes()
    ]
    return pd.DataFrame(rows, columns=[
        'Node', 'Stage', 'Left', 'Right', 'Height', 'Rescaled Height', 'X Position',
    ])


def square_frame(mat, labels: Sequence) -> pd.DataFrame:
    """Square matrix labelled on both axes."""
    labels = [str(lab) for lab in labels]
    return pd.DataFrame(np.asarray(mat, dtype=float), index=labels, columns=labels)


def centers_frame(centers) -> pd.DataFrame:
    """Variables × clusters center table."""
    k = centers.centers.shape[0]
    return pd.DataFrame(
        centers.centers.T,
        index=list(centers.variables),
        columns=[str(c) for c in range(1, k + 1)],
    )


def centers_file_frame(centers) -> pd.DataFrame:
    """One row per cluster, in the layout `read_centers` accepts back."""
    df = pd.DataFrame(centers.centers, columns=list(centers.variables))
    df.insert(0, 'Cluster', range(1, len(df) + 1))
    return df


def iteration_frame(history) -> pd.DataFrame:
    """Change in cluster centers per iteration."""
    rows = []
    for rec in history.iterations:
        row = {'Iteration': rec.iteration}
        row.update({str(c + 1): ch for c, ch in enumerate(rec.changes)})
        rows.append(row)
    return pd.DataFrame(rows)


def kmeans_membership_frame(rows) -> pd.DataFrame:
    """Case number, label, cluster and distance per case."""
    return pd.DataFrame(
        [(r.case_number, r.case_label, r.cluster, r.distance) for r in rows],
        columns=['Case Number', 'Case Name', 'Cluster', 'Distance'],
    )


def counts_frame(counts) -> pd.DataFrame:
    """Number of cases in each cluster."""
    df = pd.DataFrame({
        'Cluster': [str(c) for c in range(1, len(counts.counts) + 1)],
        'Cases': counts.counts,
    })
    extra = pd.DataFrame({'Cluster': ['Valid', 'Missing'], 'Cases': [counts.valid, counts.missing]})
    return pd.concat([df, extra], ignore_index=True)


def anova_frame(rows) -> pd.DataFrame:
    """ANOVA table per variable."""
    return pd.DataFrame(
        [(r.variable, r.mean_square, r.df, r.error_mean_square, r.error_df, r.f, r.significance)
         for r in rows],
        columns=['Variable', 'Mean Square', 'df', 'Error Mean Square', 'Error df', 'F', 'Sig.'],
    )


def result_frames(result: AnalysisResult) -> Dict[str, pd.DataFrame]:
    """Convert every structure of an analysis result into a DataFrame."""
    t = result.tables
    frames: Dict[str, pd.DataFrame] = {}
    if 'proximity_matrix' in t:
        frames['proximity_matrix'] = square_frame(t['proximity_matrix'], t['case_labels'])
    if 'agglomeration_schedule' in t:
        frames['agglomeration_schedule'] = schedule_frame(t['agglomeration_schedule'])
    if 'dendrogram' in t:
        frames['dendrogram'] = dendrogram_frame(t['dendrogram'])
    if t.get('cluster_memberships'):
        frames['cluster_memberships'] = memberships_frame(
            t['cluster_memberships'], t['case_labels'])
    if 'initial_centers' in t:
        frames['initial_cluster_centers'] = centers_frame(t['initial_centers'])
    if 'iteration_history' in t:
        frames['iteration_history'] = iteration_frame(t['iteration_history'])
    if 'cluster_membership' in t:
        frames['cluster_membership'] = kmeans_membership_frame(t['cluster_membership'])
    if 'final_centers' in t:
        frames['final_cluster_centers'] = centers_frame(t['final_centers'])
    if 'distances_between_centers' in t:
        mat = t['distances_between_centers']
        frames['distances_between_centers'] = square_frame(mat, range(1, mat.shape[0] + 1))
    if 'case_counts' in t:
        frames['case_counts'] = counts_frame(t['case_counts'])
    if 'anova' in t:
        frames['anova'] = anova_frame(t['anova'])
    return frames


def write_table(df: pd.DataFrame, path) -> Path:
    """Write one table to a CSV at path.

    Creates parent directories if needed.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    index = not isinstance(df.index, pd.RangeIndex)
    df.to_csv(p, index=index)
    return p


def write_centers(centers, path) -> Path:
    """Save final cluster centers so a later run can read them as initial centers."""
    p = write_table(centers_file_frame(centers), path)
    logging.info('Final cluster centers written to %s', p)
    return p


def write_result(result: AnalysisResult, folder) -> List[Path]:
    """Write every table of the result as `<name>.csv` into folder."""
    written = [
        write_table(df, Path(folder) / f'{name}.csv')
        for name, df in result_frames(result).items()
    ]
    logging.info('Wrote %d result tables to %s', len(written), folder)
    return written
