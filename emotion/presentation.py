# presentation.py  -- labels, JSON payloads and the overlay drawn on live frames
import cv2

from emotion.config import BOX_COLOR, BOX_THICKNESS


def label_text(emotion):
    return f"{emotion.english} / {emotion.arabic}"


def prediction_payload(prediction, mirror=False):
    if prediction is None:
        return None
    emotion = prediction.emotion
    box = prediction.box
    if box is not None and mirror and prediction.frame_size:
        box = box.mirrored(prediction.frame_size[0])
    return {
        "index": emotion.index,
        "emotion": emotion.english,
        "emotion_ar": emotion.arabic,
        "text": label_text(emotion),
        "face": emotion.is_face,
        "confidence": prediction.confidence,
        "box": box.as_dict() if box is not None else None,
    }


def render_frame(frame, prediction=None):
    """Mirror the frame like a selfie preview and draw the face box on it."""
    out = cv2.flip(frame, 1)
    if prediction is None:
        return out
    if prediction.box is not None:
        box = prediction.box.mirrored(frame.shape[1])
        cv2.rectangle(out, box.top_left, box.bottom_right, BOX_COLOR, BOX_THICKNESS)
        origin = (box.top_left[0], max(box.top_left[1] - 10, 20))
    else:
        origin = (10, 30)
    # cv2 fonts have no Arabic glyphs; the Arabic label goes through the JSON status
    cv2.putText(out, prediction.emotion.english, origin,
                cv2.FONT_HERSHEY_SIMPLEX, 0.9, BOX_COLOR, 2)
    return out


def encode_jpeg(frame):
    ok, buffer = cv2.imencode(".jpg", frame)
    if not ok:
        raise ValueError("Could not encode frame as JPEG")
    return buffer.tobytes()


def mjpeg_chunk(jpeg):
    return (b"--frame\r\n"
            b"Content-Type: image/jpeg\r\n\r\n" + jpeg + b"\r\n")
