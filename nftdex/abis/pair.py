# /nftdex/abis/pair.py
_TRADE_TUPLE = {"internalType": "struct Pair.TradeInfo[]", "name": "", "type": "tuple[]", "components": [{"internalType": "address", "name": "trader", "type": "address"}, {"internalType": "bool", "name": "isBuy", "type": "bool"}, {"internalType": "uint256", "name": "price", "type": "uint256"}, {"internalType": "uint256", "name": "timestamp", "type": "uint256"}]}

PAIR_ABI = [
    {"type": "constructor", "stateMutability": "nonpayable", "inputs": [{"internalType": "address", "name": "_nftContract", "type": "address"}]},
    {"type": "function", "name": "buyNFT", "stateMutability": "payable", "inputs": [{"internalType": "uint256", "name": "maxPrice", "type": "uint256"}], "outputs": []},
    {"type": "function", "name": "sellNFT", "stateMutability": "nonpayable", "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}, {"internalType": "uint256", "name": "minPrice", "type": "uint256"}], "outputs": []},
    {"type": "function", "name": "addLiquidity", "stateMutability": "payable", "inputs": [{"internalType": "uint256[]", "name": "nftTokenIds", "type": "uint256[]"}], "outputs": []},
    {"type": "function", "name": "removeLiquidity", "stateMutability": "nonpayable", "inputs": [{"internalType": "uint256", "name": "lpTokenAmount", "type": "uint256"}, {"internalType": "uint256[]", "name": "nftTokenIds", "type": "uint256[]"}], "outputs": []},
    {"type": "function", "name": "addInitialLiquidity", "stateMutability": "payable", "inputs": [{"internalType": "uint256[]", "name": "nftTokenIds", "type": "uint256[]"}], "outputs": []},
    {"type": "function", "name": "getCurrentPrice", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "getSellPrice", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "getBuyQuote", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "totalCost", "type": "uint256"}, {"internalType": "uint256", "name": "fee", "type": "uint256"}]},
    {"type": "function", "name": "getPoolReserves", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "ethReserve", "type": "uint256"}, {"internalType": "uint256", "name": "nftReserveCount", "type": "uint256"}]},
    {"type": "function", "name": "getTradeHistory", "stateMutability": "view", "inputs": [], "outputs": [_TRADE_TUPLE]},
    {"type": "function", "name": "getRecentTrades", "stateMutability": "view", "inputs": [{"internalType": "uint256", "name": "count", "type": "uint256"}], "outputs": [_TRADE_TUPLE]},
    {"type": "function", "name": "getAccumulatedFees", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "withdrawFees", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"type": "function", "name": "pause", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"type": "function", "name": "unpause", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"type": "event", "name": "NFTBought", "anonymous": False, "inputs": [{"indexed": True, "internalType": "address", "name": "buyer", "type": "address"}, {"indexed": False, "internalType": "uint256", "name": "tokenId", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "price", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "fee", "type": "uint256"}]},
    {"type": "event", "name": "NFTSold", "anonymous": False, "inputs": [{"indexed": True, "internalType": "address", "name": "seller", "type": "address"}, {"indexed": False, "internalType": "uint256", "name": "tokenId", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "price", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "fee", "type": "uint256"}]},
    {"type": "event", "name": "LiquidityAdded", "anonymous": False, "inputs": [{"indexed": False, "internalType": "uint256", "name": "ethAmount", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "nftCount", "type": "uint256"}]},
]
