# config.py
# Configuration constants for the face verification application.

# Match thresholds (euclidean distance between descriptors)
STRONG_MATCH_DISTANCE = 0.5
MATCH_DISTANCE = 0.6

# Reference quality
BLUR_THRESHOLD = 100.0

# Camera settings
CAMERA_INDEX = 0
CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480

# Detection settings
# "cnn" (MMOD network file) or "hog" (built into dlib)
DETECTOR_MODEL = "cnn"
DETECT_SCALE = 0.5
DETECT_UPSAMPLE = 1

# Scheduling (milliseconds)
FRAME_INTERVAL_MS = 10
MODEL_POLL_MS = 100

# Model artifacts, resolved against the model directory
MODEL_FILES = {
    "detector": "mmod_human_face_detector.dat",
    "landmarks": "shape_predictor_68_face_landmarks.dat",
    "recognition": "dlib_face_recognition_resnet_model_v1.dat",
}

# Box colours (BGR)
COLOR_STRONG_MATCH = (0, 255, 0)
COLOR_BORDERLINE = (0, 165, 255)
COLOR_NO_MATCH = (0, 0, 255)
