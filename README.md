# rtypenet

The wire protocol, the UDP and TCP transports, and two simulation systems
(gravity physics and sprite-sheet animation) for a small multiplayer shooter.
Pure Python, with no third-party dependencies.

## Modules

### `rtypenet.packet`: header and base class

Every packet is a 15-byte little-endian header followed by a payload. The
header holds these fields:

| field      | type     | meaning                         |
|------------|----------|---------------------------------|
| size       | `uint32` | header + payload length         |
| type       | `uint8`  | a `PacketType` value            |
| timestamp  | `uint64` | milliseconds since the epoch    |
| data size  | `uint16` | payload length                  |

- `PacketType` is an `IntEnum`. Its values run from `HELLOSERVER = 0` to
  `KICKCLIENT = 13`, and there are also `NONE = -1` and `ALL = 14`.
- `parse_header(buffer)` returns a frozen `PacketHeader` with the fields
  `size`, `type`, `timestamp` and `data_size`.
- `packet_size_from_buffer(buffer)` reads the size as a signed 32-bit value.
  `packet_type_from_buffer(buffer)` reads the type byte.
- `Packet` is the abstract base. It is a dataclass with a keyword-only
  `timestamp` (the default is the current time in ms) and a `size` (the
  default is 0). Its other members are:
  - the properties `type` and `data_size`;
  - `serialize()`, `serialize_header()` and `serialize_data()`;
  - the classmethod `from_buffer(buffer, size)`.

Every function above raises `PacketException` when the buffer is too short,
when the size is negative, or when a field cannot be encoded.

### `rtypenet.session_packets`

| class               | fields                                  |
|---------------------|-----------------------------------------|
| `PacketHelloServer` | `version` (float32), `project_name`     |
| `PacketHelloClient` | `entity_id` (uint32)                    |
| `PacketByeServer`   | (no payload)                            |
| `PacketPing`        | (no payload)                            |
| `PacketACK`         | `packet_type`, `packet_timestamp`       |
| `PacketKickClient`  | `reason`                                |
| `PacketClientInput` | `input`                                 |

When a `PacketHelloServer` is decoded, `project_name` is read up to the first
NUL byte or the end of the buffer.

### `rtypenet.entity_packets`

| class                    | fields                                          |
|--------------------------|-------------------------------------------------|
| `PacketEntityShow`       | `entity_id`, `x`, `y`                           |
| `PacketEntityHide`       | `entity_id`                                     |
| `PacketEntityCreate`     | `entity_uuid`, `path`, `x=0.0`, `y=0.0`         |
| `PacketEntityDestroy`    | `entity_uuid`                                   |
| `PacketEntityMove`       | `entity_uuid`, `x`, `y`, `x_dir`, `y_dir`       |
| `PacketControllableMove` | `entity_id`, `x`, `y`, `x_dir`, `y_dir`         |
| `PacketEntityUpdate`     | `entity_uuid`, `components` (a string)          |

On the wire a UUID takes a fixed `UUID_SIZE` of 36 bytes, padded with NUL
bytes. If a UUID is longer than that, encoding it raises `PacketException`.

### `rtypenet.factory`

`create_packet(buffer, bytes_received)` decodes raw bytes into the matching
packet class. It returns `None` in two cases:

- the header announces more bytes than `bytes_received`;
- the type is unknown. This case is also logged.

It raises `PacketException` if the buffer cannot be read.

### `rtypenet.udp`

- `UDP(port=0, host="0.0.0.0")` is a bound datagram socket. It has these
  members:
  - `local_endpoint`;
  - `send_data(packet, endpoint, handler)`, which calls
    `handler(error, bytes_sent)`, or logs errors when `handler` is `None`;
  - `receive_data(handler)`, which starts a background thread that calls
    `handler(packet, sender)` for each decoded datagram (up to 4096 bytes);
  - `close()`.

  It is also a context manager.
- `UDPClient(address, port, local_port=0)` resolves the server. Its methods
  are `send_to_server(packet)` and `start_receive_from_server(handler)`.
- `UDPServer(port, host="0.0.0.0")` has the method `start_receive(handler)`.

Binding or resolving failures raise `ConnectionException`.

### `rtypenet.tcp`

- `TCP.send_data(sock, packet)` sends one packet.
  `TCP.receive_data(sock, callback)` reads the socket in a background thread.
  It decodes each `recv` of up to 4096 bytes as one packet and passes it to
  `callback(packet)`. Packets are not reassembled across reads.
- `TCPClient(address, port)` connects at once. It raises
  `ConnectionException` on failure. Its methods are `send_to_server`,
  `receive_from_server` and `close()`.
- `TCPServer(port, host="0.0.0.0")` accepts connections in a background
  thread. Its members are:
  - `port` and `clients`;
  - `send_to_all(packet)`, which sends to every connection it keeps;
  - `set_accept_callback(callback)`, which hands each new connection to
    `callback` instead of keeping it;
  - `set_disconnect_callback(callback)`, which stores a callback;
  - `close()`.

Both transport classes are context managers.

### `rtypenet.systems`

- Data types: `Vector2`, `FloatRect`, `Transform`, `RigidBody` and
  `Drawable`.
- `Clock(time_source=time.monotonic)` has the methods `elapsed()` and
  `restart()`.
- `apply_physics(transform, rigidbody, dt)` acts only when the body uses
  gravity and is not kinematic. It then:
  1. adds `(0, 9.81) * mass` to the acceleration;
  2. integrates position and velocity;
  3. resets the acceleration to zero.
- `PhysicSystem().run(bodies, dt)` applies this to each
  `(transform, rigidbody)` pair.
- `AnimationSystem().run(drawables, dt)` steps each auto-playing animated
  `Drawable` by one frame once its clock reaches `frame_duration`. It wraps
  back to `start_position` after `frame_count`, and it updates `texture_rect`.
  When it reaches a drawable whose frame time has not yet elapsed, it stops
  processing the remaining drawables for that call.
- Both systems have an `enabled` flag and a `name` property.

### `rtypenet.errors`

`NetworkException` is the base class. Its subclasses are `PacketException` and
`ConnectionException`.

## Example

```python
from rtypenet.session_packets import PacketKickClient
from rtypenet.factory import create_packet

raw = PacketKickClient("Server is full").serialize()
packet = create_packet(raw, len(raw))
print(packet.reason)  # Server is full
```

A UDP server that answers pings:

```python
from rtypenet.packet import PacketType
from rtypenet.session_packets import PacketPing
from rtypenet.udp import UDPServer

server = UDPServer(4242)

def on_packet(packet, endpoint):
    if packet.type == PacketType.PING:
        server.send_data(PacketPing(), endpoint, None)

server.start_receive(on_packet)
```

## What it does not do

This package provides building blocks, not a game. It does not include:

- an entity registry or a scene loader;
- a scripting layer or rendering;
- the client and server session logic built on these packets, such as
  handshakes, acknowledgement resends, timeouts and assigning players to
  entities;
- any command-line program.

## Installing and testing

```
pip install ".[test]"
pytest
```