from vibecore.services.clustering.kmeans import ContentClusterer, KMeansResult, initialize_centroids

__all__ = ["ContentClusterer", "KMeansResult", "initialize_centroids"]
