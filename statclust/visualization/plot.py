"""statclust visualization utilities."""

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt  # noqa: E402


def plot_dendrogram(dendrogram, out_path, rescale=True):
    """Draw the dendrogram horizontally and save it to the given path.

    Leaves are listed top to bottom in dendrogram order; merge heights are
    drawn on the 0-25 rescaled axis unless `rescale` is False.
    """
    def height(node):
        return dendrogram.rescaled_height(node.height) if rescale else node.height

    n = dendrogram.num_items
    fig, ax = plt.subplots(figsize=(8, max(2.0, 0.3 * n)))
    for node in dendrogram.root.iter_postorder():
        if node.is_leaf:
            continue
        h = height(node)
        for child in (node.left, node.right):
            ax.plot([height(child), h], [child.x_position] * 2, color='tab:blue', lw=1)
        ax.plot([h, h], [node.left.x_position, node.right.x_position], color='tab:blue', lw=1)

    leaves = dendrogram.root.leaves()
    ax.set_yticks([leaf.x_position for leaf in leaves])
    ax.set_yticklabels([leaf.label for leaf in leaves])
    ax.invert_yaxis()
    ax.set_xlabel('Rescaled Distance Cluster Combine' if rescale else 'Distance')
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path
