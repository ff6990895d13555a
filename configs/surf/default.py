# Configuration for matching overlapping RGB rasters

config = {
    "model": {
        "octave_start": 2,
        "octave_end": 2,
        "ratio_threshold": 0.8,  # nearest / second-nearest, exclusive
    },

    "feature_detector": {
        "surf_threshold": 0.001,  # minimum Hessian determinant
    },

    "matching": {
        "matching_threshold": 0.015,  # normalized descriptor distance
    },
}
