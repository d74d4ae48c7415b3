"""Line sources feeding the indexer."""
