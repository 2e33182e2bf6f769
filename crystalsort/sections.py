GRID_STATE = "grid-state"
COLUMN_SELECTION = "column-selection"
CANDIDATE_SEARCH = "candidate-search"
SCORING = "scoring"
BUILD_LOOP = "build-loop"
RENDERING = "rendering"
PIXEL_DEMO = "pixel-demo"
