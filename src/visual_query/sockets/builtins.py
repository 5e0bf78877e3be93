from visual_query.registry import SocketType


SocketCoverage = SocketType("Coverage", "A coverage served by a WCS server.")
SocketImage2D = SocketType("Image2D", "A georeferenced two-dimensional image.")
SocketInt = SocketType("Int", "An integer value.")
SocketReal = SocketType("Real", "A floating point value.")
SocketRVec4 = SocketType("RVec4", "Four real values, e.g. long/lat bounds.")
SocketWCSTime = SocketType("WCSTime", "A time stamp understood by a WCS server.")
SocketString = SocketType("String", "A text value.")
SocketLUT = SocketType("LUT", "A colour look-up table.")

socket_type_list = [
    SocketCoverage,
    SocketImage2D,
    SocketInt,
    SocketReal,
    SocketRVec4,
    SocketWCSTime,
    SocketString,
    SocketLUT,
]

type_promotions = {
    ("Int", "Real"),
}
