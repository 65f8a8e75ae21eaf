"""
Server-side Lua scripts.

Redis runs each script to completion before serving any other command, so
each one behaves as a single atomic transaction against the keys it touches.
"""

# KEYS[1]: bucket key
# ARGV[1]: payload, ARGV[2]: bucket TTL in seconds
# Returns the bucket length after the append.
PUSH_SCRIPT = """
local size = redis.call('RPUSH', KEYS[1], ARGV[1])
redis.call('EXPIRE', KEYS[1], ARGV[2])
return size
"""

# KEYS[1]: cursor key
# ARGV[1]: matured tick, ARGV[2]: cursor TTL in seconds,
# ARGV[3]: batch limit, ARGV[4]: bucket key prefix
# Returns {cursor tick as seen by this call, popped payloads}.
#
# The bucket key is derived from the cursor inside the script, so the script
# touches a key it was not given in KEYS. That works on Redis Cluster because
# the bucket shares the cursor's hash tag and so its slot, but proxies that
# route scripts by their declared KEYS cannot see the bucket. Passing it in
# KEYS would need a separate cursor read and a second round trip.
PULL_SCRIPT = """
local cursor = redis.call('GET', KEYS[1])
if not cursor then
    cursor = ARGV[1]
    redis.call('SET', KEYS[1], cursor, 'EX', ARGV[2])
end

local bucket = ARGV[4] .. cursor
local tasks = {}
for i = 1, tonumber(ARGV[3]) do
    local task = redis.call('LPOP', bucket)
    if not task then
        break
    end
    tasks[i] = task
end

if #tasks == 0 and tonumber(cursor) < tonumber(ARGV[1]) then
    redis.call('INCR', KEYS[1])
    redis.call('EXPIRE', KEYS[1], ARGV[2])
end

return {tonumber(cursor), tasks}
"""
