# /nftdex/abis/standard_nft.py
STANDARD_NFT_ABI = [
    {"type": "constructor", "stateMutability": "nonpayable", "inputs": [{"internalType": "string", "name": "name", "type": "string"}, {"internalType": "string", "name": "symbol", "type": "string"}, {"internalType": "string", "name": "baseURI", "type": "string"}, {"internalType": "uint256", "name": "maxSupply", "type": "uint256"}, {"internalType": "uint256", "name": "maxMintPerAddress", "type": "uint256"}, {"internalType": "uint256", "name": "mintPrice", "type": "uint256"}]},
    {"type": "function", "name": "name", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "string", "name": "", "type": "string"}]},
    {"type": "function", "name": "symbol", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "string", "name": "", "type": "string"}]},
    {"type": "function", "name": "totalSupply", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "maxSupply", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "maxMintPerAddress", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "mintPrice", "stateMutability": "view", "inputs": [], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "balanceOf", "stateMutability": "view", "inputs": [{"internalType": "address", "name": "owner", "type": "address"}], "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}]},
    {"type": "function", "name": "ownerOf", "stateMutability": "view", "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}], "outputs": [{"internalType": "address", "name": "", "type": "address"}]},
    {"type": "function", "name": "tokenURI", "stateMutability": "view", "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}], "outputs": [{"internalType": "string", "name": "", "type": "string"}]},
    {"type": "function", "name": "isApprovedForAll", "stateMutability": "view", "inputs": [{"internalType": "address", "name": "owner", "type": "address"}, {"internalType": "address", "name": "operator", "type": "address"}], "outputs": [{"internalType": "bool", "name": "", "type": "bool"}]},
    {"type": "function", "name": "approve", "stateMutability": "nonpayable", "inputs": [{"internalType": "address", "name": "to", "type": "address"}, {"internalType": "uint256", "name": "tokenId", "type": "uint256"}], "outputs": []},
    {"type": "function", "name": "setApprovalForAll", "stateMutability": "nonpayable", "inputs": [{"internalType": "address", "name": "operator", "type": "address"}, {"internalType": "bool", "name": "approved", "type": "bool"}], "outputs": []},
    {"type": "function", "name": "mint", "stateMutability": "payable", "inputs": [{"internalType": "address", "name": "to", "type": "address"}, {"internalType": "string", "name": "uri", "type": "string"}], "outputs": []},
    {"type": "function", "name": "premint", "stateMutability": "nonpayable", "inputs": [{"internalType": "address", "name": "to", "type": "address"}, {"internalType": "uint256", "name": "count", "type": "uint256"}], "outputs": []},
    {"type": "event", "name": "Transfer", "anonymous": False, "inputs": [{"indexed": True, "internalType": "address", "name": "from", "type": "address"}, {"indexed": True, "internalType": "address", "name": "to", "type": "address"}, {"indexed": True, "internalType": "uint256", "name": "tokenId", "type": "uint256"}]},
    {"type": "event", "name": "Minted", "anonymous": False, "inputs": [{"indexed": True, "internalType": "address", "name": "to", "type": "address"}, {"indexed": False, "internalType": "uint256", "name": "tokenId", "type": "uint256"}, {"indexed": False, "internalType": "uint256", "name": "price", "type": "uint256"}]},
]
