import time

import av
import streamlit as st
from streamlit_webrtc import webrtc_streamer, WebRtcMode, RTCConfiguration, VideoProcessorBase

from robohand.config import ICE_SERVERS, ConfigError, GameConfig, configure_logging
from robohand.gesture_utils import LiveMoveTracker, RPSMove
from robohand.landmark_source import HandLandmarkSource, draw_hand
from robohand.orchestrator import GameState, MatchOrchestrator

REFRESH_INTERVAL = 0.2  # detik antar rerun selama countdown

MOVE_ICONS = {
    RPSMove.ROCK.value: "🪨",
    RPSMove.PAPER.value: "📄",
    RPSMove.SCISSORS.value: "✂️",
    RPSMove.NONE.value: "❓",
}
OUTCOME_TEXT = {
    "player": ("success", "YOU WIN!"),
    "ai": ("error", "AI WINS!"),
    "draw": ("warning", "DRAW!"),
}

st.set_page_config("Robo-Hand RPS", "✊")
st.title("✊ Robo-Hand Battle Arena")


class MoveVideoProcessor(VideoProcessorBase):
    """Runs on the webrtc worker thread: detect, classify, feed the tracker."""

    def __init__(self, tracker: LiveMoveTracker):
        self.tracker = tracker
        self.source = HandLandmarkSource()

    def recv(self, frame):
        img = frame.to_ndarray(format="bgr24")
        hand = self.source.process(img)
        self.tracker.observe(hand)
        draw_hand(img, hand)
        return av.VideoFrame.from_ndarray(img, format="bgr24")

    def on_ended(self):
        self.tracker.reset()
        self.source.close()


# ── Inisialisasi session_state ─────────────────────────
if "game" not in st.session_state:
    configure_logging()
    try:
        cfg = GameConfig.from_env()
    except ConfigError as e:
        st.error(f"Invalid configuration: {e}")
        st.stop()
    st.session_state.tracker = LiveMoveTracker()
    st.session_state.game = MatchOrchestrator(st.session_state.tracker, cfg)

game: MatchOrchestrator = st.session_state.game
tracker: LiveMoveTracker = st.session_state.tracker


def show_error():
    if game.last_error:
        st.error(game.last_error)


# =========================================================
#  LOBBY TAB
# =========================================================
tab_lobby, tab_game = st.tabs(["🏠 Lobby", "🎮 Game"])

with tab_lobby:
    st.subheader("Lobby: Register Challenger")

    name = st.text_input("Your name", max_chars=game.config.max_name_length).strip()
    if st.button("Register", disabled=game.state == GameState.COUNTDOWN):
        if game.register_player(name):
            st.success(f"Welcome, **{name}**! Head to the Game tab.")
        else:
            show_error()

    snap = game.snapshot()
    if snap["player"]:
        st.info(f"Current challenger: **{snap['player']}**")
    elif game.config.require_registration:
        st.warning("Please enter your name to continue.")

# =========================================================
#  GAME TAB
# =========================================================
with tab_game:
    ctx = webrtc_streamer(
        key="cam",
        mode=WebRtcMode.SENDRECV,
        video_processor_factory=lambda: MoveVideoProcessor(tracker),
        media_stream_constraints={"video": True, "audio": False},
        async_processing=True,
        rtc_configuration=RTCConfiguration({"iceServers": ICE_SERVERS}),
    )

    if ctx.state.playing and ctx.video_processor:
        game.mark_detector_ready()
    else:
        tracker.reset()

    snap = game.snapshot()
    c1, c2, c3 = st.columns(3)
    c1.metric(snap["player"] or "YOU", snap["score"]["player"])
    c2.metric("ROUND", f"{snap['round']} / {snap['max_rounds']}")
    c3.metric("AI", snap["score"]["ai"])

    state = snap["state"]
    gesture = tracker.current
    st.write(f"Live gesture → **{gesture.value.upper() if gesture != RPSMove.NONE else 'NO HAND'}**")

    if state == GameState.LOADING.value:
        st.info("Press START on the camera to load the hand detector.")

    elif state == GameState.IDLE.value:
        if st.button("⚔️ Start Battle"):
            game.start_round()
            st.rerun()
        show_error()

    elif state.startswith(GameState.COUNTDOWN.value):
        st.header(str(snap["countdown"]) if snap["countdown"] > 0 else "SHOOT!")
        time.sleep(REFRESH_INTERVAL)
        st.rerun()

    elif state == GameState.RESULT.value:
        last = snap["last_round"]
        kind, text = OUTCOME_TEXT[last["outcome"]]
        getattr(st, kind)(f"**{text}**")
        p, a = st.columns(2)
        p.markdown(f"**YOU** {MOVE_ICONS[last['player_move']]} {last['player_move'].upper()}")
        a.markdown(f"**AI** {MOVE_ICONS[last['ai_move']]} {last['ai_move'].upper()}")
        if last["substituted"]:
            st.caption("No hand seen at the capture instant; a random move was played for you.")

        label = "👤 Next Challenger" if snap["session_complete"] else "▶️ Next Round"
        if st.button(label):
            game.advance()
            st.rerun()
        show_error()

# ── Battle log ─────────────────────────────────────────
with st.sidebar:
    st.subheader("Battle Log")
    for entry in reversed(game.snapshot()["log"]):
        st.text(entry)
