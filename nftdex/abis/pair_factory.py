# /nftdex/abis/pair_factory.py
PAIR_FACTORY_ABI = [
    {"type": "constructor", "stateMutability": "nonpayable", "inputs": []},
    {"type": "function", "name": "createPool", "stateMutability": "nonpayable", "inputs": [{"internalType": "address", "name": "nftContract", "type": "address"}], "outputs": [{"internalType": "address", "name": "poolAddress", "type": "address"}]},
    {"type": "function", "name": "getPoolAddress", "stateMutability": "view", "inputs": [{"internalType": "address", "name": "nftContract", "type": "address"}], "outputs": [{"internalType": "address", "name": "poolAddress", "type": "address"}]},
    {"type": "function", "name": "owner", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "address", "name": "", "type": "address"}]},
    {"type": "event", "name": "PoolCreated", "anonymous": False, "inputs": [{"indexed": True, "internalType": "address", "name": "poolAddress", "type": "address"}, {"indexed": True, "internalType": "address", "name": "nftContract", "type": "address"}]},
]
