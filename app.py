# app.py
import logging
import time

from flask import Flask, Response, jsonify, render_template, request

from emotion.errors import InvalidUpload, ModelNotReady
from emotion.models import load_emotion_classifier, load_face_locator
from emotion.presentation import encode_jpeg, mjpeg_chunk, prediction_payload, render_frame
from emotion.registry import ModelRegistry
from emotion.sampler import PipelineState, VideoSampler
from emotion.sources import CameraSource
from emotion.still import StillSession, Upload

logger = logging.getLogger(__name__)

FEED_INTERVAL = 0.03  # seconds between MJPEG frames
LOADING_MESSAGE = "Models are still loading, please wait"


def _upload_from_request():
    if request.files:
        f = request.files.get("file")
        if f is None:
            return None
        return Upload(f.filename or "", f.mimetype or "", f.read())
    content = request.get_json(silent=True) or {}
    img_b64 = content.get("image")
    if not img_b64:
        return None
    return Upload.from_data_url(img_b64, content.get("name", "snapshot"))


def create_app(registry=None, source_factory=CameraSource, load=True):
    app = Flask(__name__)

    if registry is None:
        registry = ModelRegistry(load_face_locator, load_emotion_classifier)
    if load:
        registry.load()

    still = StillSession(registry)
    sampler = VideoSampler(registry, source_factory)
    app.extensions["emotion"] = {"registry": registry, "still": still, "sampler": sampler}

    def video_payload():
        state, prediction, _ = sampler.snapshot()
        return {"state": state.value, "prediction": prediction_payload(prediction, mirror=True)}

    @app.route("/")
    def index():
        return render_template("index.html")

    @app.route("/status")
    def status():
        return jsonify({"models": registry.state(), "video": sampler.state.value})

    @app.route("/predict", methods=["POST"])
    def predict():
        try:
            upload = _upload_from_request()
        except InvalidUpload as e:
            result = still.reject(str(e))
            return jsonify({"error": result.warning}), 400
        try:
            result = still.submit(upload)
        except ModelNotReady:
            return jsonify({"error": LOADING_MESSAGE}), 503
        except Exception as e:
            logger.exception("Prediction failed")
            return jsonify({"error": str(e)}), 500
        if result.warning is not None:
            return jsonify({"error": result.warning}), 400
        return jsonify(prediction_payload(result.prediction))

    @app.route("/still")
    def still_status():
        filename, prediction = still.snapshot()
        return jsonify({"filename": filename, "prediction": prediction_payload(prediction)})

    @app.route("/clear", methods=["POST"])
    def clear():
        still.clear()
        return jsonify({"cleared": True})

    @app.route("/video/start", methods=["POST"])
    def video_start():
        sampler.start()
        return jsonify(video_payload())

    @app.route("/video/stop", methods=["POST"])
    def video_stop():
        sampler.stop()
        return jsonify(video_payload())

    @app.route("/video/status")
    def video_status():
        return jsonify(video_payload())

    @app.route("/video_feed")
    def video_feed():
        def generate_frames():
            last = None
            while True:
                state, prediction, frame = sampler.snapshot()
                if state is not PipelineState.RUNNING and state is not PipelineState.LOADING:
                    break
                if frame is not None and frame is not last:
                    last = frame
                    yield mjpeg_chunk(encode_jpeg(render_frame(frame, prediction)))
                time.sleep(FEED_INTERVAL)

        return Response(generate_frames(), mimetype="multipart/x-mixed-replace; boundary=frame")

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # For production use gunicorn; locally you can use debug True
    create_app().run(host="0.0.0.0", port=5000, debug=False, threaded=True)
