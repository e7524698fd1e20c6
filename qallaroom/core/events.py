# WebSocket event names. Every frame is {"type": <name>, "data": <payload>}.

# client -> server
HELLO = "hello"
JOIN = "join"
MESSAGE = "message"

RTC_JOIN = "rtc:join"
RTC_LEAVE = "rtc:leave"
RTC_OFFER = "rtc:offer"
RTC_ANSWER = "rtc:answer"
RTC_ICE = "rtc:ice"

# server -> client
CHANNELS = "channels"
HISTORY = "history"
AUTH_OK = "auth:ok"
AUTH_ERROR = "auth:error"
PRESENCE_LIST = "presence:list"

RTC_PEERS = "rtc:peers"
RTC_PEER_JOINED = "rtc:peer_joined"
RTC_PEER_LEFT = "rtc:peer_left"
RTC_JOIN_DENIED = "rtc:join_denied"

# Signaling kinds and the payload field each one must carry
SIGNAL_FIELDS = {
    RTC_OFFER: "sdp",
    RTC_ANSWER: "sdp",
    RTC_ICE: "candidate",
}
